"""
Swap settlement against a pool, including the pool's mid-swap funding callback.

The pool calls ``swap_callback`` synchronously before its ``swap`` returns.
The callback re-derives the pool it expects for the pair carried in the
side-channel payload and refuses any other caller before moving funds.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from eth_utils import to_checksum_address

from ..providers.base import Ledger
from .amounts import address_to_int
from .assets import is_native
from .codec import SwapCallbackData
from .constants import MAX_INT256, MAX_SQRT_RATIO_MINUS_ONE, MIN_SQRT_RATIO_PLUS_ONE
from .errors import InsufficientSwap, InvalidSwap, NoRoute, Overflow, Unauthorized
from .routing import PoolRouter, Route

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapContext:
    """Resolved swap legs; native legs are already replaced by the wrapped token."""

    payer: str
    token_in: str
    token_out: str
    amount_in: int
    min_amount_out: int
    native_in: bool
    native_out: bool

    @property
    def zero_for_one(self) -> bool:
        return address_to_int(self.token_in) < address_to_int(self.token_out)


@dataclass(frozen=True)
class SwapResult:
    pool: str
    fee: int
    amount_in: int
    amount_out: int
    amount0_delta: int
    amount1_delta: int


def ensure_representable(amount: int) -> None:
    if amount > MAX_INT256:
        raise Overflow(f"Input amount {amount} exceeds int256")


def realized_output(zero_for_one: bool, amount0_delta: int, amount1_delta: int) -> int:
    """Output leaving the pool: the negated delta on the output side."""

    return -(amount1_delta if zero_for_one else amount0_delta)


class SwapSettlement:
    def __init__(self, ledger: Ledger, router: PoolRouter, address: str, wrapped_native: str):
        self.ledger = ledger
        self.router = router
        self.address = to_checksum_address(address)
        self.wrapped_native = to_checksum_address(wrapped_native)

    def build_context(
        self,
        payer: str,
        asset_in: str,
        asset_out: str,
        amount_in: int,
        min_amount_out: int,
    ) -> SwapContext:
        native_in = is_native(asset_in)
        native_out = is_native(asset_out)
        return SwapContext(
            payer=to_checksum_address(payer),
            token_in=self.wrapped_native if native_in else to_checksum_address(asset_in),
            token_out=self.wrapped_native if native_out else to_checksum_address(asset_out),
            amount_in=amount_in,
            min_amount_out=min_amount_out,
            native_in=native_in,
            native_out=native_out,
        )

    def route(self, context: SwapContext) -> Route:
        route = self.router.route(context.token_in, context.token_out)
        if not route.found:
            raise NoRoute(f"No pool for {context.token_in}/{context.token_out}")
        return route

    def settle(self, context: SwapContext, route: Optional[Route] = None) -> Tuple[int, int]:
        """Invoke the pool and return its signed ``(delta0, delta1)``."""

        ensure_representable(context.amount_in)
        route = route or self.route(context)

        payload = SwapCallbackData(
            native_in=context.native_in,
            native_out=context.native_out,
            payer=context.payer,
            token_in=context.token_in,
            token_out=context.token_out,
            fee=route.fee,
        ).encode()
        recipient = self.address if context.native_out else context.payer
        price_limit = MIN_SQRT_RATIO_PLUS_ONE if route.zero_for_one else MAX_SQRT_RATIO_MINUS_ONE

        logger.info(
            "settling swap of %s %s for %s via %s (%s)",
            context.amount_in, context.token_in, context.token_out, route.pool, route.source,
        )
        venue = self.ledger.get_venue(route.pool)
        amount0, amount1 = venue.swap(
            self,
            recipient,
            route.zero_for_one,
            context.amount_in,
            price_limit,
            payload,
        )
        return amount0, amount1

    def convert(self, context: SwapContext) -> SwapResult:
        """Wrap or unwrap one-for-one when the only difference is the native leg."""

        amount = context.amount_in
        if amount < context.min_amount_out:
            raise InsufficientSwap(f"Conversion yields {amount}, below the minimum of {context.min_amount_out}")
        if context.native_in:
            # The native input already sits with the engine
            self.ledger.wrap(self.address, amount)
            self.ledger.transfer(self.wrapped_native, self.address, context.payer, amount)
        else:
            self.ledger.transfer_from(self.wrapped_native, self.address, context.payer, self.address, amount)
            self.ledger.unwrap(self.address, amount)
            self.ledger.transfer_native(self.address, context.payer, amount)
        logger.info("%s %s for %s", "wrapped" if context.native_in else "unwrapped", amount, context.payer)
        return SwapResult(
            pool=self.wrapped_native,
            fee=0,
            amount_in=amount,
            amount_out=amount,
            amount0_delta=amount,
            amount1_delta=-amount,
        )

    def swap(self, context: SwapContext) -> SwapResult:
        ensure_representable(context.amount_in)
        if context.token_in == context.token_out and context.native_in != context.native_out:
            return self.convert(context)
        route = self.route(context)
        amount0, amount1 = self.settle(context, route)
        amount_out = realized_output(context.zero_for_one, amount0, amount1)
        if amount_out < context.min_amount_out:
            raise InsufficientSwap(
                f"Swap returned {amount_out}, below the minimum of {context.min_amount_out}"
            )
        return SwapResult(
            pool=route.pool,
            fee=route.fee,
            amount_in=context.amount_in,
            amount_out=amount_out,
            amount0_delta=amount0,
            amount1_delta=amount1,
        )

    def swap_callback(self, caller: str, amount0_delta: int, amount1_delta: int, data: bytes) -> None:
        """Fund a pool mid-swap once it proves to be the pool we routed to."""

        if amount0_delta <= 0 and amount1_delta <= 0:
            raise InvalidSwap()

        info = SwapCallbackData.decode(data)
        expected = self.router.expected_venue(info.token_in, info.token_out, info.fee)
        if to_checksum_address(caller) != expected:
            logger.warning("rejected swap callback from %s, expected %s", caller, expected)
            raise Unauthorized(f"Swap callback from unexpected pool {caller}")

        zero_for_one = address_to_int(info.token_in) < address_to_int(info.token_out)
        amount_owed = amount0_delta if amount0_delta > 0 else amount1_delta

        if info.native_in:
            self.ledger.wrap(self.address, amount_owed)
            self.ledger.transfer(info.token_in, self.address, expected, amount_owed)
        else:
            self.ledger.transfer_from(info.token_in, self.address, info.payer, expected, amount_owed)

        if info.native_out:
            amount_out = realized_output(zero_for_one, amount0_delta, amount1_delta)
            self.ledger.unwrap(self.address, amount_out)
            self.ledger.transfer_native(self.address, info.payer, amount_out)


__all__ = [
    "SwapContext",
    "SwapResult",
    "SwapSettlement",
    "realized_output",
    "ensure_representable",
]
