from __future__ import annotations

import string
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

# Relative frequencies of a-z in English text, indexed by alphabet position.
ENGLISH_FREQUENCIES: tuple[float, ...] = (
    0.082, 0.015, 0.028, 0.043, 0.127, 0.022, 0.020, 0.061, 0.070, 0.002,
    0.008, 0.040, 0.024, 0.067, 0.075, 0.019, 0.001, 0.060, 0.063, 0.091,
    0.028, 0.010, 0.023, 0.001, 0.020, 0.001,
)

# English letters, most frequent first.
ENGLISH_FREQUENCY_ORDER = "etaoinsrhdlucmfywgpbvkxqjz"

DEFAULT_SAMPLE_LIMIT = 2000


@dataclass(frozen=True)
class Alphabet:
    """Ordered, duplicate-free symbol set; its length is the modulus."""

    symbols: str = string.ascii_lowercase

    def __post_init__(self) -> None:
        if len(self.symbols) < 2:
            raise ValueError("Alphabet needs at least two symbols.")
        if len(set(self.symbols)) != len(self.symbols):
            raise ValueError(f"Alphabet '{self.symbols}' repeats a symbol.")
        object.__setattr__(self, "_index", {ch: i for i, ch in enumerate(self.symbols)})

    def __len__(self) -> int:
        return len(self.symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._index

    def __getitem__(self, i: int) -> str:
        return self.symbols[i]

    def __iter__(self):
        return iter(self.symbols)

    def index(self, symbol: str) -> int:
        return self._index[symbol]

    def in_range(self, symbol: str) -> bool:
        """True if symbol sits between the lowest and highest alphabet characters."""
        return min(self.symbols) <= symbol <= max(self.symbols)

    def filter(self, text: str, fold_case: bool = True) -> str:
        """Keep only alphabet symbols (after lowercasing when fold_case is set)."""
        if fold_case:
            text = text.lower()
        return "".join(ch for ch in text if ch in self._index)


@dataclass(frozen=True)
class CrackConfig:
    alphabet: Alphabet = field(default_factory=Alphabet)
    frequency_order: str = ENGLISH_FREQUENCY_ORDER
    reference_frequencies: tuple[float, ...] = ENGLISH_FREQUENCIES
    sample_limit: int = DEFAULT_SAMPLE_LIMIT
    fold_case: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.alphabet, str):
            object.__setattr__(self, "alphabet", Alphabet(self.alphabet))
        object.__setattr__(self, "reference_frequencies", tuple(float(f) for f in self.reference_frequencies))

        n = len(self.alphabet)
        if len(self.reference_frequencies) != n:
            raise ValueError(
                f"Reference table has {len(self.reference_frequencies)} entries; alphabet has {n} symbols."
            )
        bad = [ch for ch in self.frequency_order if ch not in self.alphabet]
        if bad:
            raise ValueError(f"Frequency order uses symbols outside the alphabet: {''.join(bad)}")
        if self.sample_limit < 1:
            raise ValueError("Sample limit must be positive.")
        if self.fold_case and self.alphabet.symbols != self.alphabet.symbols.lower():
            raise ValueError(
                f"Alphabet '{self.alphabet.symbols}' has upper-case symbols; case folding would never match them."
            )

    @property
    def modulus(self) -> int:
        return len(self.alphabet)

    def normalize(self, text: str) -> str:
        return text.lower() if self.fold_case else text

    def with_reference(self, frequencies: Sequence[float]) -> "CrackConfig":
        return CrackConfig(
            alphabet=self.alphabet,
            frequency_order=self.frequency_order,
            reference_frequencies=tuple(frequencies),
            sample_limit=self.sample_limit,
            fold_case=self.fold_case,
        )


DEFAULT_CONFIG = CrackConfig()


def config_for_alphabet(symbols: str) -> CrackConfig:
    """
    Build a config for a custom alphabet.

    The English tables only apply to a-z (or A-Z). For any other alphabet the
    reference table is uniform and the frequency order is the alphabet order,
    so callers that care should load a real table with load_frequency_table().
    Alphabets with upper-case symbols match text exactly, without case folding.
    """
    alphabet = Alphabet(symbols)
    if alphabet.symbols == DEFAULT_CONFIG.alphabet.symbols:
        return DEFAULT_CONFIG
    if alphabet.symbols == string.ascii_uppercase:
        return CrackConfig(alphabet=alphabet, frequency_order=ENGLISH_FREQUENCY_ORDER.upper(), fold_case=False)

    n = len(alphabet)
    return CrackConfig(
        alphabet=alphabet,
        frequency_order=alphabet.symbols,
        reference_frequencies=tuple(1.0 / n for _ in range(n)),
        fold_case=alphabet.symbols == alphabet.symbols.lower(),
    )


def load_frequency_table(path: str | Path, alphabet: Alphabet | None = None) -> tuple[float, ...]:
    """
    Read a reference table from lines like 'e 0.127' (',' or '=' also accepted).

    Values are normalized to sum to 1. Symbols missing from the file get 0.
    """
    alphabet = alphabet or Alphabet()
    text = Path(path).read_text(encoding="utf-8")

    vals: dict[str, float] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        line = line.replace("=", " ").replace(",", " ")
        parts = line.split()
        if len(parts) < 2:
            continue

        sym = parts[0]
        if sym not in alphabet:
            sym = sym.lower() if sym.lower() in alphabet else sym.upper()
        if sym not in alphabet:
            continue
        try:
            vals[sym] = float(parts[1])
        except ValueError:
            continue

    if not vals:
        raise ValueError(f"No valid frequency lines found in {path}. Expected lines like 'e 0.127'.")

    total = sum(vals.values())
    if total <= 0:
        raise ValueError(f"Frequencies in {path} sum to <= 0.")
    return tuple(vals.get(ch, 0.0) / total for ch in alphabet)
