from __future__ import annotations

import logging
from typing import Iterable, Sequence

from cryptool.core.config import Alphabet

logger = logging.getLogger(__name__)

KnownPair = tuple[str, str]


class InvalidKeyError(ValueError):
    """Key that cannot drive the cipher (non-invertible multiplier, empty keyword...)."""


def parse_two_ints(key: str) -> tuple[int, int]:
    """
    Parse keys like: "5,8" or "5:8" or "5 8"
    Returns (a, b).
    """
    raw = key.strip().replace(":", ",").replace(" ", ",")
    parts = [p for p in raw.split(",") if p]
    if len(parts) != 2:
        raise ValueError("Expected key format like 'a,b' (e.g., '5,8').")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError as e:
        raise ValueError(f"Key parts must be integers, got '{key}'.") from e


def parse_known_pair(item: str) -> KnownPair:
    """
    Accept 'm:c', 'm,c', 'm=c', 'm c' or the two-letter form 'mc'.
    Returns (plain, cipher) as typed; clean_known_pairs() does the case folding.
    """
    s = item.strip()
    for sep in (":", ",", "=", " "):
        if sep in s:
            parts = [p.strip() for p in s.split(sep, 1)]
            break
    else:
        parts = list(s)

    if len(parts) != 2 or len(parts[0]) != 1 or len(parts[1]) != 1:
        raise ValueError(f"Bad known pair '{item}'. Use single symbols like 'e:x'.")
    return parts[0], parts[1]


def parse_known_pairs(items: Iterable[str]) -> list[KnownPair]:
    return [parse_known_pair(item) for item in items]


def clean_known_pairs(
    known: Sequence[KnownPair], alphabet: Alphabet, fold_case: bool = True
) -> list[KnownPair]:
    """Case-fold known pairs and drop any that use symbols outside the alphabet."""
    out: list[KnownPair] = []
    for plain, cipher in known:
        if fold_case:
            plain, cipher = plain.lower(), cipher.lower()
        if plain not in alphabet or cipher not in alphabet:
            logger.warning("Ignoring known pair %r -> %r: symbol not in alphabet", plain, cipher)
            continue
        out.append((plain, cipher))
    return out


def norm_key_alpha(key: str, alphabet: Alphabet, fold_case: bool = True) -> str:
    """Keep only alphabet symbols of a keyword (lowercased when fold_case is set)."""
    return alphabet.filter(key, fold_case=fold_case)


def transform_symbols(text: str, alphabet: Alphabet, fn, fold_case: bool = True) -> str:
    """
    Map every alphabet symbol through fn(index, position) -> index.

    position counts alphabet symbols only; anything outside the alphabet is
    copied as-is. Uppercase is folded to lowercase first when fold_case is set.
    """
    if fold_case:
        text = text.lower()
    n = len(alphabet)
    out = []
    j = 0
    for ch in text:
        if ch in alphabet:
            out.append(alphabet[fn(alphabet.index(ch), j) % n])
            j += 1
        else:
            out.append(ch)
    return "".join(out)
