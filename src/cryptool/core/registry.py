from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from .config import DEFAULT_CONFIG, CrackConfig

logger = logging.getLogger(__name__)


class CipherPlugin(Protocol):
    name: str
    family: str

    def encrypt(self, plaintext: str, key: str, config: CrackConfig = DEFAULT_CONFIG) -> str:
        ...

    def decrypt(self, ciphertext: str, key: str, config: CrackConfig = DEFAULT_CONFIG) -> str:
        ...


@dataclass
class _PluginEntry:
    plugin: CipherPlugin


_PLUGINS: dict[str, _PluginEntry] = {}


def register_plugin(plugin: CipherPlugin) -> None:
    key = plugin.name.lower().strip()
    if not key:
        raise ValueError("Plugin must have a non-empty name.")
    if key in _PLUGINS:
        logger.debug("Replacing cipher plugin '%s'", key)
    _PLUGINS[key] = _PluginEntry(plugin=plugin)


def list_plugins() -> list[str]:
    return sorted(_PLUGINS.keys())


def get_plugin(cipher_name: str) -> CipherPlugin:
    name = cipher_name.lower().strip()
    if name not in _PLUGINS:
        raise ValueError(f"Unknown cipher '{cipher_name}'. Available: {', '.join(list_plugins())}")
    return _PLUGINS[name].plugin


def encrypt_known(
    cipher_name: str, plaintext: str, key: Optional[str], config: CrackConfig = DEFAULT_CONFIG
) -> str:
    if key is None:
        raise ValueError("This encrypt operation requires --key.")
    return get_plugin(cipher_name).encrypt(plaintext, key, config)


def decrypt_known(
    cipher_name: str, ciphertext: str, key: Optional[str], config: CrackConfig = DEFAULT_CONFIG
) -> str:
    if key is None:
        raise ValueError("This decrypt operation requires --key.")
    return get_plugin(cipher_name).decrypt(ciphertext, key, config)
