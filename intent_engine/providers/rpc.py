"""Read-only ledger backed by an Ethereum JSON-RPC node."""

from __future__ import annotations

import logging
from itertools import count
from typing import Any, Dict, List, Optional

import httpx

from ..core.amounts import hex_to_bytes
from ..core.codec import WORD, encode_address, read_uint, selector
from ..core.errors import LedgerError
from .base import Ledger

logger = logging.getLogger(__name__)


def decode_string_result(data: bytes) -> str:
    """Decode an ABI ``string`` return, accepting legacy ``bytes32`` tokens."""

    if len(data) == WORD:
        return data.rstrip(b"\x00").decode("utf-8", errors="replace")
    offset = read_uint(data, 0)
    length = read_uint(data, offset)
    return data[offset + WORD:offset + WORD + length].decode("utf-8", errors="replace")


class JsonRpcLedger(Ledger):
    """Ledger reads over JSON-RPC ``eth_call`` / ``eth_getCode`` / ``eth_getBalance``"""

    name = "rpc"

    def __init__(self, url: str, timeout_s: int = 30, client: Optional[httpx.Client] = None):
        self.url = url
        self.timeout_s = timeout_s
        self._client = client or httpx.Client(timeout=timeout_s)
        self._ids = count(1)

    def close(self) -> None:
        self._client.close()

    def _rpc(self, method: str, params: List[Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        try:
            response = self._client.post(
                self.url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            raise LedgerError(f"RPC {method} failed: {exc}") from exc

        if "error" in data:
            raise LedgerError(f"RPC {method} error: {data['error']}")
        return data["result"]

    def eth_call(self, to: str, data: bytes) -> bytes:
        result = self._rpc("eth_call", [{"to": to, "data": "0x" + data.hex()}, "latest"])
        return hex_to_bytes(result)

    def health_check(self) -> Dict[str, Any]:
        try:
            chain_id = int(self._rpc("eth_chainId", []), 16)
            return {"status": "healthy", "ledger": self.name, "chain_id": chain_id}
        except LedgerError as exc:
            return {"status": "error", "ledger": self.name, "reason": str(exc)}

    def get_code(self, address: str) -> bytes:
        return hex_to_bytes(self._rpc("eth_getCode", [address, "latest"]))

    def native_balance(self, account: str) -> int:
        return int(self._rpc("eth_getBalance", [account, "latest"]), 16)

    def balance_of(self, token: str, account: str) -> int:
        result = self.eth_call(token, selector("balanceOf(address)") + encode_address(account))
        return read_uint(result, 0)

    def decimals(self, token: str) -> int:
        return read_uint(self.eth_call(token, selector("decimals()")), 0)

    def symbol(self, token: str) -> str:
        return decode_string_result(self.eth_call(token, selector("symbol()")))

    def token_name(self, token: str) -> str:
        return decode_string_result(self.eth_call(token, selector("name()")))

    def total_supply(self, token: str) -> int:
        return read_uint(self.eth_call(token, selector("totalSupply()")), 0)


__all__ = [
    "JsonRpcLedger",
    "decode_string_result",
]
