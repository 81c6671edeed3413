from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

# Known-pair score meaning "this key is taken as correct".
CERTAIN = 2
# Known-pair score meaning "this key contradicts a known pair".
CONTRADICTED = -1


@dataclass(frozen=True)
class AffineCandidate:
    a: int
    b: int
    plaintext: str

    # Known pairs confirmed by this key (0, 1 or 2)
    matches: int = 0

    # Which search produced it: brute, known, mixed, frequency
    stage: str = "brute"

    @property
    def key(self) -> str:
        return f"{self.a},{self.b}"

    @property
    def certain(self) -> bool:
        return self.matches >= CERTAIN

    def __iter__(self) -> Iterator[Any]:
        # unpacks as the (a, b, plaintext) triple
        return iter((self.a, self.b, self.plaintext))

    def to_dict(self) -> dict[str, Any]:
        return {
            "a": self.a,
            "b": self.b,
            "plaintext": self.plaintext,
            "matches": self.matches,
            "stage": self.stage,
        }


@dataclass(frozen=True, order=True)
class KeyLengthCandidate:
    # sort_index first so ordering is most matches, then shortest length
    sort_index: tuple[int, int] = field(init=False, repr=False)

    length: int
    matches: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "sort_index", (-self.matches, self.length))

    def to_dict(self) -> dict[str, Any]:
        return {"length": self.length, "matches": self.matches}


@dataclass(frozen=True)
class VigenereCandidate:
    key_length: int
    key: str
    matches: int
    plaintext: str

    notes: str = ""
    meta: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key_length": self.key_length,
            "key": self.key,
            "matches": self.matches,
            "plaintext": self.plaintext,
            "notes": self.notes,
            "meta": dict(self.meta),
        }

