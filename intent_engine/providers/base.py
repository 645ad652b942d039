from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Protocol, Tuple

from ..core.errors import LedgerError


class SwapCallback(Protocol):
    """Receiver of a venue's mid-swap funding request."""

    def swap_callback(self, caller: str, amount0_delta: int, amount1_delta: int, data: bytes) -> None:
        ...


class Venue(ABC):
    """Exchange pool able to settle a swap between its two tokens"""

    address: str
    token0: str
    token1: str
    fee: int

    @abstractmethod
    def swap(
        self,
        payer: SwapCallback,
        recipient: str,
        zero_for_one: bool,
        amount_specified: int,
        sqrt_price_limit_x96: int,
        data: bytes,
    ) -> Tuple[int, int]:
        """Settle a swap, calling back ``payer`` for funding before returning deltas"""
        pass


class Ledger(ABC):
    """Ledger substrate: balances, code, token metadata and transfer primitives"""

    name: str

    @abstractmethod
    def health_check(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def get_code(self, address: str) -> bytes:
        pass

    @abstractmethod
    def native_balance(self, account: str) -> int:
        pass

    @abstractmethod
    def balance_of(self, token: str, account: str) -> int:
        pass

    @abstractmethod
    def decimals(self, token: str) -> int:
        pass

    @abstractmethod
    def symbol(self, token: str) -> str:
        pass

    @abstractmethod
    def token_name(self, token: str) -> str:
        pass

    @abstractmethod
    def total_supply(self, token: str) -> int:
        pass

    # Execution primitives. Read-only ledgers keep these defaults.

    def transfer_native(self, sender: str, to: str, amount: int) -> None:
        raise LedgerError(f"{self.name} ledger is read-only")

    def transfer(self, token: str, sender: str, to: str, amount: int) -> None:
        raise LedgerError(f"{self.name} ledger is read-only")

    def transfer_from(self, token: str, spender: str, owner: str, to: str, amount: int) -> None:
        raise LedgerError(f"{self.name} ledger is read-only")

    def wrap(self, account: str, amount: int) -> None:
        raise LedgerError(f"{self.name} ledger is read-only")

    def unwrap(self, account: str, amount: int) -> None:
        raise LedgerError(f"{self.name} ledger is read-only")

    def get_venue(self, address: str) -> Venue:
        raise LedgerError(f"{self.name} ledger cannot settle swaps")

    @contextmanager
    def atomic(self) -> Iterator[None]:
        """All-or-nothing scope for one invocation"""
        yield


@dataclass(frozen=True)
class NameRecord:
    owner: str
    receiver: str
    node: str


class NameService(ABC):
    """Maps a human account name to an account identifier"""

    name: str

    @abstractmethod
    def whois(self, name: str) -> Optional[NameRecord]:
        pass
