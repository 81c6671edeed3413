from __future__ import annotations

import logging
from typing import Optional, Sequence

from cryptool.classical.common import InvalidKeyError, norm_key_alpha, transform_symbols
from cryptool.core.config import DEFAULT_CONFIG, Alphabet, CrackConfig
from cryptool.core.frequency import relative_frequencies
from cryptool.core.registry import register_plugin
from cryptool.core.results import KeyLengthCandidate, VigenereCandidate

logger = logging.getLogger(__name__)


class VigenereTransformer:
    def __init__(self, key: str, alphabet: Optional[Alphabet] = None, fold_case: bool = True):
        self.alphabet = alphabet or Alphabet()
        self.fold_case = fold_case

        k = norm_key_alpha(key, self.alphabet, fold_case)
        raw = key.lower() if fold_case else key
        if not k:
            raise InvalidKeyError("Vigenère key must contain at least one alphabet symbol.")
        if len(k) != len(raw.strip()):
            raise InvalidKeyError(f"Vigenère key '{key}' has symbols outside the alphabet '{self.alphabet.symbols}'.")
        self.key = k
        self.shifts = [self.alphabet.index(ch) for ch in k]

    def encrypt(self, text: str) -> str:
        shifts = self.shifts
        return transform_symbols(text, self.alphabet, lambda m, j: m + shifts[j % len(shifts)], self.fold_case)

    def decrypt(self, text: str) -> str:
        shifts = self.shifts
        return transform_symbols(text, self.alphabet, lambda c, j: c - shifts[j % len(shifts)], self.fold_case)


def prepare_ciphertext(ciphertext: str, config: CrackConfig = DEFAULT_CONFIG, limit: Optional[int] = None) -> str:
    """Alphabet symbols only, case-folded, at most `limit` symbols (config.sample_limit by default)."""
    az = config.alphabet.filter(ciphertext, fold_case=config.fold_case)
    return az[: config.sample_limit if limit is None else limit]


def _coincidences(text: str, offset: int) -> int:
    return sum(1 for x, y in zip(text, text[offset:]) if x == y)


def score_key_lengths(
    ciphertext: str, max_length: int, config: CrackConfig = DEFAULT_CONFIG
) -> list[KeyLengthCandidate]:
    """Self-alignment match count for every trial length 1..max_length."""
    sample = prepare_ciphertext(ciphertext, config)
    return [KeyLengthCandidate(length=k, matches=_coincidences(sample, k)) for k in range(1, max_length + 1)]


def _best_lengths(scores: list[KeyLengthCandidate]) -> list[KeyLengthCandidate]:
    if not scores:
        return []
    best = max(s.matches for s in scores)
    if best == 0:
        return []
    return [s for s in scores if s.matches == best]


def estimate_key_lengths(ciphertext: str, max_length: int, config: CrackConfig = DEFAULT_CONFIG) -> list[int]:
    """
    Key lengths whose self-alignment match count ties for the maximum.

    Shifting the ciphertext by the key length (or a multiple of it) lines up
    symbols enciphered with the same key letter, so those offsets collect more
    coincidences than the others. Ties are all reported, shortest first.
    """
    best = _best_lengths(score_key_lengths(ciphertext, max_length, config))
    logger.debug("Best key lengths: %s", [(s.length, s.matches) for s in best])
    return [s.length for s in best]


def best_shift(column: str, reference: Sequence[float], alphabet: Optional[Alphabet] = None) -> Optional[int]:
    """
    Shift whose rotated reference table best matches the column's profile.

    Observed frequency at alphabet position j is weighted by reference
    position (n - s + j) mod n. Returns None when no shift scores above 0
    (e.g. empty column).
    """
    alphabet = alphabet or Alphabet()
    n = len(alphabet)
    observed = relative_frequencies(column, alphabet)

    max_dot = 0.0
    max_shift: Optional[int] = None
    for s in range(n):
        dot = 0.0
        for j in range(n):
            dot += reference[(n - s + j) % n] * observed[j]
        if dot > max_dot:
            max_dot = dot
            max_shift = s
    return max_shift


def crack_columns(
    ciphertext: str,
    key_length: int,
    reference_frequencies: Optional[Sequence[float]] = None,
    config: CrackConfig = DEFAULT_CONFIG,
) -> Optional[str]:
    """
    Recover a key of the given length one column at a time.

    Returns None when the length does not fit the text or some column gives
    no confident shift.
    """
    alphabet = config.alphabet
    reference = config.reference_frequencies if reference_frequencies is None else reference_frequencies
    if len(reference) != len(alphabet):
        raise ValueError(f"Reference table needs {len(alphabet)} entries, got {len(reference)}.")

    text = alphabet.filter(ciphertext, fold_case=config.fold_case)
    if key_length < 1 or key_length > len(text):
        logger.debug("Key length %d does not fit %d symbols", key_length, len(text))
        return None

    key = []
    for start in range(key_length):
        shift = best_shift(text[start::key_length], reference, alphabet)
        if shift is None:
            logger.debug("No confident shift for column %d of %d", start, key_length)
            return None
        key.append(alphabet[shift])
    return "".join(key)


def reduce_repeating_key(key: str) -> str:
    """
    If a key is a perfect repetition of a shorter pattern, reduce it.
    Example: lemonlemon -> lemon
    """
    for p in range(1, len(key) // 2 + 1):
        if len(key) % p != 0:
            continue
        base = key[:p]
        if base * (len(key) // p) == key:
            return base
    return key


def crack(ciphertext: str, max_length: int, config: CrackConfig = DEFAULT_CONFIG) -> list[VigenereCandidate]:
    """Estimate key lengths, recover one key per length and decrypt with it."""
    sample = prepare_ciphertext(ciphertext, config)
    best = _best_lengths(score_key_lengths(sample, max_length, config))

    results: list[VigenereCandidate] = []
    for cand in best:
        key = crack_columns(sample, cand.length, config=config)
        if key is None:
            continue

        meta = {"sample_length": len(sample)}
        reduced = reduce_repeating_key(key)
        if reduced != key:
            meta["reduced_key"] = reduced

        pt = VigenereTransformer(key, config.alphabet, config.fold_case).decrypt(ciphertext)
        results.append(
            VigenereCandidate(
                key_length=cand.length,
                key=key,
                matches=cand.matches,
                plaintext=pt,
                notes=f"Autocorrelation keylen={cand.length} ({cand.matches} matches)",
                meta=meta,
            )
        )

    if not results:
        logger.info("No Vigenère key recovered from %d symbols", len(sample))
    return results


class VigenereCipher:
    name = "vigenere"
    family = "polyalphabetic"

    def encrypt(self, plaintext: str, key: str, config: CrackConfig = DEFAULT_CONFIG) -> str:
        return VigenereTransformer(key, config.alphabet, config.fold_case).encrypt(plaintext)

    def decrypt(self, ciphertext: str, key: str, config: CrackConfig = DEFAULT_CONFIG) -> str:
        return VigenereTransformer(key, config.alphabet, config.fold_case).decrypt(ciphertext)


register_plugin(VigenereCipher())
