"""
Affine cipher: c = a*m + b (mod n), and attacks on it.

Two attacks are provided:

- crack_all: try every (a, b) with gcd(a, n) == 1.
- crack_linear: solve the 2x2 linear system mod n from known pairs, then from
  known pairs mixed with frequency guesses, then from frequency guesses alone.

Both score candidates against the caller's known (plain, cipher) pairs. A key
that maps a known plain symbol to the wrong cipher symbol is dropped; a key
that confirms two known pairs is taken as the answer and the search stops.
Two confirmations are a heuristic for "found it", not a proof.
"""
from __future__ import annotations

import logging
from itertools import combinations
from typing import Iterable, Iterator, Optional, Sequence

from cryptool.classical.common import (
    InvalidKeyError,
    KnownPair,
    clean_known_pairs,
    parse_two_ints,
    transform_symbols,
)
from cryptool.core.config import DEFAULT_CONFIG, Alphabet, CrackConfig
from cryptool.core.frequency import SymbolSource, observed_ranking, rank_frequencies
from cryptool.core.modular import gcd, inverse_mod, mod, units
from cryptool.core.registry import register_plugin
from cryptool.core.results import CERTAIN, CONTRADICTED, AffineCandidate

logger = logging.getLogger(__name__)


class AffineTransformer:
    def __init__(self, a: int, b: int, alphabet: Optional[Alphabet] = None, fold_case: bool = True):
        self.alphabet = alphabet or Alphabet()
        n = len(self.alphabet)
        if gcd(a, n) != 1:
            raise InvalidKeyError(f"Affine key 'a' must be coprime with {n} (valid: {units(n)}).")
        self.a = mod(a, n)
        self.b = mod(b, n)
        self.a_inv = inverse_mod(self.a, n)
        self.fold_case = fold_case

    def encrypt(self, text: str) -> str:
        return transform_symbols(text, self.alphabet, lambda m, _: self.a * m + self.b, self.fold_case)

    def decrypt(self, text: str) -> str:
        return transform_symbols(text, self.alphabet, lambda c, _: self.a_inv * (c - self.b), self.fold_case)


def linsolve(p1: tuple[int, int], p2: tuple[int, int], n: int = 26) -> Optional[tuple[int, int]]:
    """
    Solve a*x1 + b = y1, a*x2 + b = y2 (mod n) for (a, b).

    a = (y2 - y1) * (x2 - x1)^-1 mod n, b = y1 - a*x1 mod n. When x2 - x1 has
    no inverse the congruence is reduced by g = gcd(x2 - x1, n); it is only
    accepted if exactly one of the g roots is coprime with n. This accepts
    more pairs than the plain inverse formula, which rejects any x2 - x1 without
    an inverse. Returns None when there is no invertible a or the pairs do not
    determine a single one.
    """
    x1, y1 = p1
    x2, y2 = p2

    d = mod(x2 - x1, n)
    e = mod(y2 - y1, n)
    g = gcd(d, n)
    if e % g:
        return None

    step = n // g
    a0 = mod((e // g) * inverse_mod(d // g, step), step) if step > 1 else 0
    roots = [a for a in range(a0, n, step) if gcd(a, n) == 1]
    if len(roots) != 1:
        return None

    a = roots[0]
    b = mod(y1 - x1 * a, n)
    return a, b


def check_solution(
    a: int, b: int, ciphertext: str, known: Sequence[KnownPair], config: CrackConfig = DEFAULT_CONFIG
) -> tuple[int, str]:
    """
    Decrypt with (a, b) and count the known pairs it confirms.

    For each pair the first occurrence of the plain symbol in the decryption is
    looked up; the ciphertext symbol at that position must be the expected one.
    Returns (CONTRADICTED, text) on the first mismatch, otherwise (matches, text)
    where matches stops counting at CERTAIN.
    """
    plaintext = AffineTransformer(a, b, config.alphabet, config.fold_case).decrypt(ciphertext)
    cipher = config.normalize(ciphertext)

    matches = 0
    for plain, expected in known:
        index = plaintext.find(plain)
        if index == -1:
            continue
        if cipher[index] != expected:
            logger.debug("a=%d b=%d contradicts known %s->%s", a, b, plain, expected)
            return CONTRADICTED, plaintext
        matches += 1
        if matches == CERTAIN:
            break

    return matches, plaintext


def take_until_certain(candidates: Iterable[AffineCandidate]) -> Iterator[AffineCandidate]:
    """Drop contradicted candidates; stop right after the first certain one."""
    for cand in candidates:
        if cand.matches == CONTRADICTED:
            continue
        yield cand
        if cand.certain:
            logger.debug("Certain key found: a=%d b=%d (%s)", cand.a, cand.b, cand.stage)
            return


def iter_brute_force(
    ciphertext: str, known: Sequence[KnownPair], config: CrackConfig = DEFAULT_CONFIG
) -> Iterator[AffineCandidate]:
    n = config.modulus
    for a in units(n):
        for b in range(n):
            matches, pt = check_solution(a, b, ciphertext, known, config)
            yield AffineCandidate(a=a, b=b, plaintext=pt, matches=matches, stage="brute")


def crack_all(
    ciphertext_line: str,
    known_pairs: Sequence[KnownPair] = (),
    config: CrackConfig = DEFAULT_CONFIG,
) -> list[AffineCandidate]:
    """Every non-contradicted (a, b) decryption, stopping at the first certain key."""
    if not config.alphabet.filter(ciphertext_line, config.fold_case):
        return []
    known = clean_known_pairs(known_pairs, config.alphabet, config.fold_case)
    return list(take_until_certain(iter_brute_force(ciphertext_line, known, config)))


class _LinearSearch:
    """One linear-system search; remembers every (a, b) it has tried."""

    def __init__(self, ciphertext: str, rest: Optional[SymbolSource], known: list[KnownPair], config: CrackConfig):
        self.ciphertext = ciphertext
        self.rest = rest
        self.known = known
        self.config = config
        self.alphabet = config.alphabet
        self.tried: set[tuple[int, int]] = set()

    def _pair(self, plain: str, cipher: str) -> tuple[int, int]:
        return self.alphabet.index(plain), self.alphabet.index(cipher)

    def _solve(self, p1: KnownPair, p2: KnownPair) -> Optional[tuple[int, int]]:
        soln = linsolve(self._pair(*p1), self._pair(*p2), self.config.modulus)
        if soln is None or soln in self.tried:
            return None
        self.tried.add(soln)
        return soln

    def _scored(self, p1: KnownPair, p2: KnownPair, stage: str) -> Optional[AffineCandidate]:
        soln = self._solve(p1, p2)
        if soln is None:
            return None
        a, b = soln
        matches, pt = check_solution(a, b, self.ciphertext, self.known, self.config)
        return AffineCandidate(a=a, b=b, plaintext=pt, matches=matches, stage=stage)

    def from_known(self) -> Iterator[AffineCandidate]:
        # Solutions built from two user-asserted pairs are accepted without scoring.
        for p1, p2 in combinations(self.known, 2):
            soln = self._solve(p1, p2)
            if soln is not None:
                a, b = soln
                pt = AffineTransformer(a, b, self.alphabet, self.config.fold_case).decrypt(self.ciphertext)
                yield AffineCandidate(a=a, b=b, plaintext=pt, matches=CERTAIN, stage="known")
                return

    def _guesses(self) -> list[KnownPair]:
        """(expected plain, observed cipher) pairs, by frequency rank."""
        sources = [self.ciphertext] if self.rest is None else [self.ciphertext, self.rest]
        ranking = rank_frequencies(*sources, alphabet=self.alphabet, fold_case=self.config.fold_case)
        observed = observed_ranking(ranking, self.alphabet)
        reference = self.config.frequency_order
        limit = min(self.config.modulus, len(reference), len(observed))
        logger.debug("Observed ranking: %s", "".join(observed[:limit]))
        return [(reference[i], observed[i]) for i in range(limit)]

    def from_frequencies(self, guesses: list[KnownPair]) -> Iterator[AffineCandidate]:
        for guess in guesses:
            for kp in self.known:
                # a guess that reuses a known's plain or cipher symbol cannot pair with it
                if guess[0] == kp[0] or guess[1] == kp[1]:
                    continue
                cand = self._scored(kp, guess, "mixed")
                if cand is not None:
                    yield cand

        for g1, g2 in combinations(guesses, 2):
            cand = self._scored(g1, g2, "frequency")
            if cand is not None:
                yield cand

    def run(self) -> Iterator[AffineCandidate]:
        found = False
        for cand in self.from_known():
            found = True
            yield cand
        if found:
            return

        logger.debug("Known pairs did not solve the system; trying frequency guesses")
        yield from self.from_frequencies(self._guesses())


def iter_linear(
    ciphertext: str,
    rest_of_stream: Optional[SymbolSource],
    known: list[KnownPair],
    config: CrackConfig = DEFAULT_CONFIG,
) -> Iterator[AffineCandidate]:
    return _LinearSearch(ciphertext, rest_of_stream, known, config).run()


def crack_linear(
    ciphertext_line: str,
    rest_of_stream: Optional[SymbolSource] = None,
    known_pairs: Sequence[KnownPair] = (),
    config: CrackConfig = DEFAULT_CONFIG,
) -> list[AffineCandidate]:
    """
    Crack by solving the linear system.

    rest_of_stream is any further text (string, open file, iterable of lines)
    that only feeds the frequency ranking; it is read only when the known
    pairs alone do not give a solution.
    """
    if not config.alphabet.filter(ciphertext_line, config.fold_case):
        logger.debug("No alphabet symbols in ciphertext; nothing to crack")
        return []
    known = clean_known_pairs(known_pairs, config.alphabet, config.fold_case)
    return list(take_until_certain(iter_linear(ciphertext_line, rest_of_stream, known, config)))


class AffineCipher:
    name = "affine"
    family = "monoalphabetic"

    def encrypt(self, plaintext: str, key: str, config: CrackConfig = DEFAULT_CONFIG) -> str:
        a, b = parse_two_ints(key)
        return AffineTransformer(a, b, config.alphabet, config.fold_case).encrypt(plaintext)

    def decrypt(self, ciphertext: str, key: str, config: CrackConfig = DEFAULT_CONFIG) -> str:
        a, b = parse_two_ints(key)
        return AffineTransformer(a, b, config.alphabet, config.fold_case).decrypt(ciphertext)


register_plugin(AffineCipher())
