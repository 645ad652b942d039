"""
Pool routing and deterministic pool address derivation.

Resolution order for a pair:

1. curated pools compiled into ``CURATED_POOLS``;
2. the governance pool route table;
3. the four standard fee tiers, each pool address derived with CREATE2 from
   ``(factory, token0, token1, fee)`` and ``init_code_hash``. Deployed
   candidates are ranked by their token0 balance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from threading import Lock
from typing import Dict, List, Optional, Tuple

from eth_utils import keccak, to_checksum_address

from ..providers.base import Ledger
from .amounts import address_to_int, hex_to_bytes, parse_address
from .codec import encode_address, encode_uint
from .constants import CURATED_POOLS, FEE_TIERS, ZERO_ADDRESS

logger = logging.getLogger(__name__)


def sort_tokens(token_a: str, token_b: str) -> Tuple[str, str]:
    if address_to_int(token_a) < address_to_int(token_b):
        return token_a, token_b
    return token_b, token_a


def compute_pool_address(
    factory: str,
    token_a: str,
    token_b: str,
    fee: int,
    init_code_hash: str,
) -> str:
    """CREATE2 address of the ``fee`` pool for a pair, in either argument order."""

    token0, token1 = sort_tokens(token_a, token_b)
    salt = keccak(encode_address(token0) + encode_address(token1) + encode_uint(fee))
    digest = keccak(b"\xff" + hex_to_bytes(factory) + salt + hex_to_bytes(init_code_hash))
    return to_checksum_address(digest[12:])


@dataclass(frozen=True)
class Route:
    pool: str
    zero_for_one: bool
    fee: int
    source: str

    @property
    def found(self) -> bool:
        return self.pool != ZERO_ADDRESS


class PoolRouteTable:
    """Governance overrides keyed by canonically ordered pair."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._routes: Dict[Tuple[str, str], str] = {}

    def set(self, token_a: str, token_b: str, pool: str) -> Tuple[str, str, str]:
        token0, token1 = sort_tokens(parse_address(token_a), parse_address(token_b))
        pool = parse_address(pool)
        with self._lock:
            self._routes[(token0.lower(), token1.lower())] = pool
        return token0, token1, pool

    def get(self, token_a: str, token_b: str) -> Optional[str]:
        token0, token1 = sort_tokens(token_a, token_b)
        with self._lock:
            return self._routes.get((token0.lower(), token1.lower()))

    def snapshot(self) -> Dict[Tuple[str, str], str]:
        with self._lock:
            return dict(self._routes)


class PoolRouter:
    def __init__(
        self,
        ledger: Ledger,
        routes: PoolRouteTable,
        factory: str,
        init_code_hash: str,
    ):
        self.ledger = ledger
        self.routes = routes
        self.factory = factory
        self.init_code_hash = init_code_hash

    def derive(self, token_a: str, token_b: str, fee: int) -> str:
        return compute_pool_address(self.factory, token_a, token_b, fee, self.init_code_hash)

    def _static_route(self, token0: str, token1: str) -> Optional[Tuple[str, int, str]]:
        curated = CURATED_POOLS.get((token0.lower(), token1.lower()))
        if curated:
            pool, fee = curated
            return to_checksum_address(pool), fee, "curated"
        override = self.routes.get(token0, token1)
        if override:
            return override, 0, "governance"
        return None

    def route(self, token_a: str, token_b: str) -> Route:
        """Pick the pool for a pair; ``zero_for_one`` is true when ``token_a`` sorts lower."""

        zero_for_one = address_to_int(token_a) < address_to_int(token_b)
        token0, token1 = sort_tokens(token_a, token_b)

        static = self._static_route(token0, token1)
        if static:
            pool, fee, source = static
            return Route(pool=pool, zero_for_one=zero_for_one, fee=fee, source=source)

        candidates: List[Tuple[str, int, int]] = []
        for fee in FEE_TIERS:
            pool = self.derive(token0, token1, fee)
            if not self.ledger.get_code(pool):
                continue
            candidates.append((pool, fee, self.ledger.balance_of(token0, pool)))

        if not candidates:
            logger.info("no pool deployed for %s/%s", token0, token1)
            return Route(pool=ZERO_ADDRESS, zero_for_one=zero_for_one, fee=0, source="none")

        best_pool, best_fee, best_liquidity = candidates[0]
        for pool, fee, liquidity in candidates[1:]:
            if liquidity > best_liquidity:
                best_pool, best_fee, best_liquidity = pool, fee, liquidity
        logger.debug("routed %s/%s to %s (fee %s, liquidity %s)", token0, token1, best_pool, best_fee, best_liquidity)
        return Route(pool=best_pool, zero_for_one=zero_for_one, fee=best_fee, source="derived")

    def expected_venue(self, token_a: str, token_b: str, fee: int) -> str:
        """Pool a settlement callback for this pair and fee must come from."""

        token0, token1 = sort_tokens(token_a, token_b)
        static = self._static_route(token0, token1)
        if static:
            return static[0]
        return self.derive(token0, token1, fee)


__all__ = [
    "sort_tokens",
    "compute_pool_address",
    "Route",
    "PoolRouteTable",
    "PoolRouter",
]
