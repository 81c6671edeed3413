from .config import DEFAULT_CONFIG, Alphabet, CrackConfig
from .results import AffineCandidate, KeyLengthCandidate, VigenereCandidate
from .frequency import count_frequencies, rank_frequencies
from .registry import register_plugin, encrypt_known, decrypt_known

__all__ = [
    "DEFAULT_CONFIG",
    "Alphabet",
    "CrackConfig",
    "AffineCandidate",
    "KeyLengthCandidate",
    "VigenereCandidate",
    "count_frequencies",
    "rank_frequencies",
    "register_plugin",
    "encrypt_known",
    "decrypt_known",
]
