"""Asset alias resolution: built-in table first, governance table second."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Dict, Optional, Tuple

from eth_utils import is_hex_address, to_checksum_address

from ..providers.base import Ledger
from .amounts import parse_address
from .constants import BUILTIN_ASSETS, BUILTIN_DECIMALS, BUILTIN_SYMBOLS, NATIVE_PLACEHOLDER

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssetInfo:
    address: str
    decimals: int

    @property
    def is_native(self) -> bool:
        return is_native(self.address)


def is_native(address: str) -> bool:
    return address.lower() == NATIVE_PLACEHOLDER.lower()


class AliasRegistry:
    """Governance-maintained name -> asset table with its reverse mapping.

    Forward keys are lowercased names; the reverse side keeps the display name
    last registered for an asset. Both sides are written under one lock, and a
    name that moves to another asset drops the stale reverse entry, so a reader
    never sees a half-written pair.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._forward: Dict[str, str] = {}
        self._reverse: Dict[str, str] = {}

    def register(self, asset: str, name: str) -> Tuple[str, str]:
        address = parse_address(asset)
        key = name.lower()
        with self._lock:
            previous = self._forward.get(key)
            if previous and previous != address:
                if self._reverse.get(previous.lower(), "").lower() == key:
                    del self._reverse[previous.lower()]
            self._forward[key] = address
            self._reverse[address.lower()] = name
        return key, address

    def lookup(self, name: str) -> Optional[str]:
        with self._lock:
            return self._forward.get(name.lower())

    def reverse(self, asset: str) -> Optional[str]:
        with self._lock:
            return self._reverse.get(asset.lower())

    def snapshot(self) -> Tuple[Dict[str, str], Dict[str, str]]:
        with self._lock:
            return dict(self._forward), dict(self._reverse)


class AssetResolver:
    """Resolves asset names and display aliases, querying the ledger for unknowns."""

    def __init__(self, aliases: AliasRegistry, ledger: Ledger):
        self.aliases = aliases
        self.ledger = ledger

    def resolve(self, name: str) -> Optional[AssetInfo]:
        """Return the asset for ``name`` or ``None`` when it is unknown."""

        key = name.lower()
        builtin = BUILTIN_ASSETS.get(key)
        if builtin:
            address, decimals = builtin
            return AssetInfo(address=to_checksum_address(address), decimals=decimals)

        address = self.aliases.lookup(key)
        if address is None and is_hex_address(key):
            address = to_checksum_address(key)
        if address is None:
            logger.debug("asset alias %s is unknown", key)
            return None
        return AssetInfo(address=address, decimals=self.decimals_of(address))

    def decimals_of(self, address: str) -> int:
        known = BUILTIN_DECIMALS.get(address.lower())
        if known is not None:
            return known
        return self.ledger.decimals(address)

    def display_name(self, address: str) -> str:
        symbol = BUILTIN_SYMBOLS.get(address.lower())
        if symbol:
            return symbol
        alias = self.aliases.reverse(address)
        if alias:
            return alias
        return self.ledger.symbol(address)


__all__ = [
    "AssetInfo",
    "AliasRegistry",
    "AssetResolver",
    "is_native",
]
