from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Callable, Iterable, MutableMapping, Optional, TextIO, Union

from .config import Alphabet

SymbolSource = Union[str, TextIO, Iterable[str]]

# Symbols are ranked over the same fixed range the byte-oriented tools used.
SYMBOL_RANGE = 255


def _chunks(source: SymbolSource) -> Iterable[str]:
    # file objects iterate by line, so they are streamed like any other iterable
    if isinstance(source, str):
        yield source
        return
    for chunk in source:
        yield chunk


def count_frequencies(
    source: SymbolSource,
    counts: MutableMapping[str, int],
    include: Optional[Callable[[str], bool]] = None,
    fold_case: bool = False,
) -> MutableMapping[str, int]:
    """Accumulate symbol counts from source into counts (in place) and return it."""
    for chunk in _chunks(source):
        if fold_case:
            chunk = chunk.lower()
        for ch in chunk:
            if include is None or include(ch):
                counts[ch] = counts.get(ch, 0) + 1
    return counts


def rank_frequencies(
    *sources: SymbolSource,
    alphabet: Optional[Alphabet] = None,
    fold_case: bool = True,
    include: Optional[Callable[[str], bool]] = None,
) -> list[tuple[str, int]]:
    """
    Rank every symbol in the 0-254 range by occurrence count, most frequent first.

    The sort is stable, so symbols with equal counts stay in ascending
    code-point order. By default only symbols inside the alphabet's character
    range are counted.
    """
    alphabet = alphabet or Alphabet()
    if include is None:
        include = alphabet.in_range

    counts: Counter[str] = Counter()
    for src in sources:
        count_frequencies(src, counts, include, fold_case=fold_case)

    table = [(chr(i), counts.get(chr(i), 0)) for i in range(SYMBOL_RANGE)]
    table.sort(key=lambda p: p[1], reverse=True)
    return table


def observed_ranking(ranking: Iterable[tuple[str, int]], alphabet: Alphabet) -> list[str]:
    """Symbols from a ranking that occurred at least once and belong to the alphabet."""
    return [sym for sym, count in ranking if count > 0 and sym in alphabet]


def relative_frequencies(text: str, alphabet: Alphabet) -> list[float]:
    """count / len(text) per alphabet position; all zeros for empty text."""
    n = len(text)
    if n == 0:
        return [0.0] * len(alphabet)
    counts = Counter(text)
    return [counts.get(ch, 0) / n for ch in alphabet]


@dataclass(frozen=True)
class FrequencyRow:
    symbol: str
    count: int
    percent: float

    @property
    def label(self) -> str:
        return self.symbol if self.symbol > " " else " "


def frequency_report(sources: Iterable[SymbolSource], fold_case: bool = True) -> list[FrequencyRow]:
    """
    Count every symbol below SYMBOL_RANGE across sources (lowercased if fold_case).

    Rows with a non-zero count, most frequent first.
    """
    counts: Counter[str] = Counter()
    for src in sources:
        count_frequencies(src, counts, lambda ch: ord(ch) < SYMBOL_RANGE, fold_case=fold_case)

    total = sum(counts.values())
    if total == 0:
        return []

    rows = [FrequencyRow(sym, c, c / total * 100.0) for sym, c in sorted(counts.items())]
    rows.sort(key=lambda r: r.count, reverse=True)
    return rows
