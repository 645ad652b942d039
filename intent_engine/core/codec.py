"""
ABI word encoding for the call payloads the engine produces and reads.

Only the handful of static layouts the engine needs are supported:
``transfer(address,uint256)``, ``execute(address,uint256,bytes)``, the engine's
own ``swap`` entrypoint and the settlement side-channel payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from eth_utils import keccak

from .amounts import bytes_to_address, hex_to_bytes
from .constants import ERC20_TRANSFER_SELECTOR, EXECUTE_SIGNATURE, SWAP_SIGNATURE
from .errors import InvalidSyntax

WORD = 32
EXECUTE_HEADER_LENGTH = 4 + WORD * 2


@lru_cache(maxsize=32)
def selector(signature: str) -> bytes:
    return keccak(text=signature)[:4]


def encode_uint(value: int) -> bytes:
    if value < 0:
        raise ValueError("Value must be non-negative")
    return value.to_bytes(WORD, "big")


def encode_address(address: str) -> bytes:
    raw = hex_to_bytes(address)
    if len(raw) != 20:
        raise ValueError(f"Invalid address length: {address}")
    return raw.rjust(WORD, b"\x00")


def encode_bool(flag: bool) -> bytes:
    return encode_uint(1 if flag else 0)


def encode_bytes(data: bytes) -> bytes:
    padded_len = ((len(data) + WORD - 1) // WORD) * WORD
    return encode_uint(len(data)) + data.ljust(padded_len, b"\x00")


def read_word(data: bytes, offset: int) -> bytes:
    word = data[offset:offset + WORD]
    if len(word) != WORD:
        raise InvalidSyntax(f"Payload truncated at offset {offset}")
    return word


def read_uint(data: bytes, offset: int) -> int:
    return int.from_bytes(read_word(data, offset), "big")


def read_address(data: bytes, offset: int) -> str:
    return bytes_to_address(read_word(data, offset)[12:])


def encode_transfer(recipient: str, amount: int) -> bytes:
    return ERC20_TRANSFER_SELECTOR + encode_address(recipient) + encode_uint(amount)


def encode_swap(token_in: str, token_out: str, amount_in: int, min_amount_out: int) -> bytes:
    return (
        selector(SWAP_SIGNATURE)
        + encode_address(token_in)
        + encode_address(token_out)
        + encode_uint(amount_in)
        + encode_uint(min_amount_out)
    )


def encode_execute(to: str, value: int, data: bytes) -> bytes:
    """Build calldata for execute(address,uint256,bytes)."""
    head = (
        encode_address(to)
        + encode_uint(value)
        + encode_uint(WORD * 3)  # offset to bytes data
    )
    return selector(EXECUTE_SIGNATURE) + head + encode_bytes(data)


@dataclass(frozen=True)
class ExecuteCall:
    """Decoded ``execute(address,uint256,bytes)`` payload."""

    to: str
    value: int
    data: bytes


def decode_execute(payload: bytes) -> ExecuteCall:
    if len(payload) < EXECUTE_HEADER_LENGTH:
        raise InvalidSyntax("Payload shorter than the execute header")
    to = read_address(payload, 4)
    value = read_uint(payload, 4 + WORD)
    data = b""
    if len(payload) > EXECUTE_HEADER_LENGTH:
        offset = 4 + read_uint(payload, 4 + WORD * 2)
        length = read_uint(payload, offset)
        data = payload[offset + WORD:offset + WORD + length]
        if len(data) != length:
            raise InvalidSyntax("Nested call data truncated")
    return ExecuteCall(to=to, value=value, data=data)


@dataclass(frozen=True)
class TransferCall:
    recipient: str
    amount: int


def decode_transfer(data: bytes) -> TransferCall:
    return TransferCall(recipient=read_address(data, 4), amount=read_uint(data, 4 + WORD))


@dataclass(frozen=True)
class SwapCallbackData:
    """Side-channel payload carried through the venue to the settlement callback."""

    native_in: bool
    native_out: bool
    payer: str
    token_in: str
    token_out: str
    fee: int

    def encode(self) -> bytes:
        return (
            encode_bool(self.native_in)
            + encode_bool(self.native_out)
            + encode_address(self.payer)
            + encode_address(self.token_in)
            + encode_address(self.token_out)
            + encode_uint(self.fee)
        )

    @classmethod
    def decode(cls, data: bytes) -> "SwapCallbackData":
        return cls(
            native_in=read_uint(data, 0) != 0,
            native_out=read_uint(data, WORD) != 0,
            payer=read_address(data, WORD * 2),
            token_in=read_address(data, WORD * 3),
            token_out=read_address(data, WORD * 4),
            fee=read_uint(data, WORD * 5),
        )


__all__ = [
    'WORD',
    'selector',
    'encode_uint',
    'encode_address',
    'encode_bytes',
    'read_uint',
    'read_address',
    'encode_transfer',
    'encode_swap',
    'encode_execute',
    'ExecuteCall',
    'decode_execute',
    'TransferCall',
    'decode_transfer',
    'SwapCallbackData',
]
