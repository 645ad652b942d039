"""
In-memory ledger with atomic rollback and constant-product pools.

Used for local execution when no node is configured, and by the test suite.
Pools price with x*y=k; the engine only ever sees the signed deltas a pool
returns.
"""

from __future__ import annotations

import copy
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock
from typing import Any, Dict, Iterator, Optional, Tuple

from eth_utils import to_checksum_address

from ..core.constants import BUILTIN_DECIMALS, BUILTIN_SYMBOLS, NATIVE_PLACEHOLDER, WETH
from ..core.errors import LedgerError
from ..core.routing import compute_pool_address, sort_tokens
from .base import Ledger, SwapCallback, Venue

logger = logging.getLogger(__name__)

POOL_CODE = b"\x60\x80"
TOKEN_CODE = b"\x60\x60"


@dataclass
class TokenMetadata:
    symbol: str
    name: str
    decimals: int


class SimulatedPool(Venue):
    """Constant-product pool that settles exact-input swaps with a funding callback."""

    def __init__(self, ledger: "SimulatedLedger", address: str, token0: str, token1: str, fee: int):
        self.ledger = ledger
        self.address = to_checksum_address(address)
        self.token0 = token0
        self.token1 = token1
        self.fee = fee

    def quote(self, zero_for_one: bool, amount_in: int) -> int:
        token_in, token_out = (self.token0, self.token1) if zero_for_one else (self.token1, self.token0)
        reserve_in = self.ledger.balance_of(token_in, self.address)
        reserve_out = self.ledger.balance_of(token_out, self.address)
        amount_in_after_fee = amount_in * (1_000_000 - self.fee) // 1_000_000
        if reserve_in + amount_in_after_fee == 0:
            return 0
        return reserve_out * amount_in_after_fee // (reserve_in + amount_in_after_fee)

    def swap(
        self,
        payer: SwapCallback,
        recipient: str,
        zero_for_one: bool,
        amount_specified: int,
        sqrt_price_limit_x96: int,
        data: bytes,
    ) -> Tuple[int, int]:
        if amount_specified <= 0:
            raise LedgerError("Only exact-input swaps are supported")

        token_in, token_out = (self.token0, self.token1) if zero_for_one else (self.token1, self.token0)
        amount_out = self.quote(zero_for_one, amount_specified)
        if zero_for_one:
            amount0, amount1 = amount_specified, -amount_out
        else:
            amount0, amount1 = -amount_out, amount_specified

        if amount_out:
            self.ledger.transfer(token_out, self.address, recipient, amount_out)

        balance_before = self.ledger.balance_of(token_in, self.address)
        payer.swap_callback(self.address, amount0, amount1, data)
        if self.ledger.balance_of(token_in, self.address) < balance_before + amount_specified:
            raise LedgerError("Pool was not paid the input amount")

        logger.debug("pool %s swapped %s in for %s out", self.address, amount_specified, amount_out)
        return amount0, amount1


class SimulatedLedger(Ledger):
    name = "simulated"

    def __init__(self, wrapped_native: str = WETH, seed_builtin_tokens: bool = True):
        self._lock = RLock()
        self.wrapped_native = to_checksum_address(wrapped_native)
        self._native: Dict[str, int] = {}
        self._balances: Dict[Tuple[str, str], int] = {}
        self._allowances: Dict[Tuple[str, str, str], int] = {}
        self._tokens: Dict[str, TokenMetadata] = {}
        self._code: Dict[str, bytes] = {}
        self._venues: Dict[str, SimulatedPool] = {}

        if seed_builtin_tokens:
            for address, symbol in BUILTIN_SYMBOLS.items():
                if address != NATIVE_PLACEHOLDER.lower():
                    self.create_token(address, symbol, symbol, BUILTIN_DECIMALS[address])
        if self.wrapped_native.lower() not in self._tokens:
            self.create_token(self.wrapped_native, "WETH", "Wrapped Ether", 18)

    # ------------------------------------------------------------------
    # Setup helpers
    # ------------------------------------------------------------------

    def create_token(self, address: str, symbol: str, name: str, decimals: int) -> str:
        address = to_checksum_address(address)
        with self._lock:
            self._tokens[address.lower()] = TokenMetadata(symbol=symbol, name=name, decimals=decimals)
            self._code[address.lower()] = TOKEN_CODE
        return address

    def mint(self, token: str, account: str, amount: int) -> None:
        self._token(token)
        with self._lock:
            key = (token.lower(), account.lower())
            self._balances[key] = self._balances.get(key, 0) + amount
            if token.lower() == self.wrapped_native.lower():
                # Minted wrapped native stays redeemable
                self.fund(self.wrapped_native, amount)

    def fund(self, account: str, amount: int) -> None:
        with self._lock:
            self._native[account.lower()] = self._native.get(account.lower(), 0) + amount

    def approve(self, token: str, owner: str, spender: str, amount: int) -> None:
        with self._lock:
            self._allowances[(token.lower(), owner.lower(), spender.lower())] = amount

    def allowance(self, token: str, owner: str, spender: str) -> int:
        with self._lock:
            return self._allowances.get((token.lower(), owner.lower(), spender.lower()), 0)

    def deploy_pool(
        self,
        token_a: str,
        token_b: str,
        fee: int,
        *,
        factory: str,
        init_code_hash: str,
        address: Optional[str] = None,
    ) -> SimulatedPool:
        """Deploy a pool at its CREATE2 address, or at ``address`` when given."""

        token0, token1 = sort_tokens(to_checksum_address(token_a), to_checksum_address(token_b))
        address = address or compute_pool_address(factory, token0, token1, fee, init_code_hash)
        pool = SimulatedPool(self, address, token0, token1, fee)
        with self._lock:
            self._code[pool.address.lower()] = POOL_CODE
            self._venues[pool.address.lower()] = pool
        return pool

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def health_check(self) -> Dict[str, Any]:
        return {"status": "healthy", "ledger": self.name, "tokens": len(self._tokens)}

    def get_code(self, address: str) -> bytes:
        return self._code.get(address.lower(), b"")

    def native_balance(self, account: str) -> int:
        return self._native.get(account.lower(), 0)

    def balance_of(self, token: str, account: str) -> int:
        return self._balances.get((token.lower(), account.lower()), 0)

    def decimals(self, token: str) -> int:
        return self._token(token).decimals

    def symbol(self, token: str) -> str:
        return self._token(token).symbol

    def token_name(self, token: str) -> str:
        return self._token(token).name

    def total_supply(self, token: str) -> int:
        self._token(token)
        return sum(amount for (held, _), amount in self._balances.items() if held == token.lower())

    def _token(self, token: str) -> TokenMetadata:
        metadata = self._tokens.get(token.lower())
        if metadata is None:
            raise LedgerError(f"No token deployed at {token}")
        return metadata

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def transfer_native(self, sender: str, to: str, amount: int) -> None:
        with self._lock:
            balance = self._native.get(sender.lower(), 0)
            if balance < amount:
                raise LedgerError(f"{sender} holds {balance} native, needs {amount}")
            self._native[sender.lower()] = balance - amount
            self._native[to.lower()] = self._native.get(to.lower(), 0) + amount

    def transfer(self, token: str, sender: str, to: str, amount: int) -> None:
        self._token(token)
        with self._lock:
            source = (token.lower(), sender.lower())
            balance = self._balances.get(source, 0)
            if balance < amount:
                raise LedgerError(f"{sender} holds {balance} of {token}, needs {amount}")
            self._balances[source] = balance - amount
            target = (token.lower(), to.lower())
            self._balances[target] = self._balances.get(target, 0) + amount

    def transfer_from(self, token: str, spender: str, owner: str, to: str, amount: int) -> None:
        with self._lock:
            key = (token.lower(), owner.lower(), spender.lower())
            allowed = self._allowances.get(key, 0)
            if allowed < amount:
                raise LedgerError(f"{spender} may move {allowed} of {owner}'s {token}, needs {amount}")
            self._allowances[key] = allowed - amount
            self.transfer(token, owner, to, amount)

    def wrap(self, account: str, amount: int) -> None:
        with self._lock:
            self.transfer_native(account, self.wrapped_native, amount)
            key = (self.wrapped_native.lower(), account.lower())
            self._balances[key] = self._balances.get(key, 0) + amount

    def unwrap(self, account: str, amount: int) -> None:
        with self._lock:
            key = (self.wrapped_native.lower(), account.lower())
            balance = self._balances.get(key, 0)
            if balance < amount:
                raise LedgerError(f"{account} holds {balance} wrapped native, needs {amount}")
            self._balances[key] = balance - amount
            self.transfer_native(self.wrapped_native, account, amount)

    def get_venue(self, address: str) -> Venue:
        venue = self._venues.get(address.lower())
        if venue is None:
            raise LedgerError(f"No pool deployed at {address}")
        return venue

    @contextmanager
    def atomic(self) -> Iterator[None]:
        with self._lock:
            snapshot = copy.deepcopy((self._native, self._balances, self._allowances))
            try:
                yield
            except Exception:
                self._native, self._balances, self._allowances = snapshot
                logger.info("rolled back simulated ledger state")
                raise


__all__ = [
    "TokenMetadata",
    "SimulatedPool",
    "SimulatedLedger",
]
