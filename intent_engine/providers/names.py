"""Name services: a static table and ENS over JSON-RPC."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from eth_utils import keccak

from ..core.amounts import parse_address
from ..core.codec import read_address, selector
from ..core.constants import ZERO_ADDRESS
from .base import NameRecord, NameService
from .rpc import JsonRpcLedger

logger = logging.getLogger(__name__)

ENS_REGISTRY = "0x00000000000C2E074eC69A0dFb2997BA6C7d2e1e"


def namehash(name: str) -> bytes:
    """EIP-137 namehash of a dotted name."""

    node = b"\x00" * 32
    if not name:
        return node
    for label in reversed(name.lower().split(".")):
        node = keccak(node + keccak(text=label))
    return node


class StaticNameService(NameService):
    """Fixed name -> account table; the account is both owner and receiver."""

    name = "static"

    def __init__(self, names: Optional[Dict[str, str]] = None):
        self._names = {key.lower(): parse_address(value) for key, value in (names or {}).items()}

    def register(self, name: str, account: str) -> None:
        self._names[name.lower()] = parse_address(account)

    def whois(self, name: str) -> Optional[NameRecord]:
        account = self._names.get(name.lower())
        if account is None:
            return None
        return NameRecord(owner=account, receiver=account, node="0x" + namehash(name).hex())


class EnsNameService(NameService):
    """Resolves bare names as ``<name>.eth`` through the ENS registry."""

    name = "ens"

    def __init__(self, ledger: JsonRpcLedger, registry: str = ENS_REGISTRY, suffix: str = "eth"):
        self.ledger = ledger
        self.registry = registry
        self.suffix = suffix

    def whois(self, name: str) -> Optional[NameRecord]:
        full_name = name if "." in name else f"{name}.{self.suffix}"
        node = namehash(full_name)

        resolver = read_address(self.ledger.eth_call(self.registry, selector("resolver(bytes32)") + node), 0)
        if resolver == ZERO_ADDRESS:
            logger.debug("no resolver for %s", full_name)
            return None
        receiver = read_address(self.ledger.eth_call(resolver, selector("addr(bytes32)") + node), 0)
        if receiver == ZERO_ADDRESS:
            return None
        owner = read_address(self.ledger.eth_call(self.registry, selector("owner(bytes32)") + node), 0)
        return NameRecord(owner=owner, receiver=receiver, node="0x" + node.hex())


__all__ = [
    "ENS_REGISTRY",
    "namehash",
    "StaticNameService",
    "EnsNameService",
]
