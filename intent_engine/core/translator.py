"""Payload -> command text, and exact payload comparison for verification."""

from __future__ import annotations

import logging

from eth_utils import keccak

from .amounts import address_to_hex, format_units
from .assets import AssetResolver
from .codec import decode_execute, decode_transfer
from .constants import ERC20_TRANSFER_SELECTOR, NATIVE_DECIMALS, NATIVE_SYMBOL
from .errors import InvalidSelector

logger = logging.getLogger(__name__)


class Translator:
    """Renders an ``execute(address,uint256,bytes)`` transfer payload as a send command."""

    def __init__(self, assets: AssetResolver):
        self.assets = assets

    def translate(self, payload: bytes) -> str:
        call = decode_execute(payload)

        if call.value:
            # Attached value wins; nested call data is not rendered
            if call.data:
                logger.warning(
                    "translating as native send to %s; ignoring %s bytes of nested call data",
                    call.to, len(call.data),
                )
            amount = format_units(call.value, NATIVE_DECIMALS)
            return f"send {amount} {NATIVE_SYMBOL} to {address_to_hex(call.to)}"

        if len(call.data) < 4 or call.data[:4] != ERC20_TRANSFER_SELECTOR:
            raise InvalidSelector(f"Nested selector 0x{call.data[:4].hex()} is not transfer")

        transfer = decode_transfer(call.data)
        alias = self.assets.display_name(call.to)
        decimals = self.assets.decimals_of(call.to)
        amount = format_units(transfer.amount, decimals)
        return f"send {amount} {alias} to {address_to_hex(transfer.recipient)}"


def payloads_match(expected: bytes, actual: bytes) -> bool:
    """Exact length and digest equality; any byte difference is a mismatch."""

    if len(expected) != len(actual):
        logger.info("payload length mismatch: expected %s, got %s", len(expected), len(actual))
        return False
    return keccak(expected) == keccak(actual)


__all__ = [
    "Translator",
    "payloads_match",
]
