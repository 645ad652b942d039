"""Shared fixtures: a simulated ledger and an engine wired to it."""

import pytest
from eth_utils import to_checksum_address

from intent_engine.core.constants import (
    CURATED_POOLS,
    DAI,
    UNISWAP_V3_FACTORY,
    UNISWAP_V3_POOL_INIT_CODE_HASH,
    WETH,
)
from intent_engine.core.engine import IntentsEngine, default_engine_address
from intent_engine.providers.names import StaticNameService
from intent_engine.providers.simulated import SimulatedLedger


@pytest.fixture
def governance():
    return to_checksum_address("0x" + "ab" * 20)


@pytest.fixture
def ledger():
    return SimulatedLedger(wrapped_native=WETH)


@pytest.fixture
def names():
    return StaticNameService({
        "vitalik": "0xd8da6bf26964af9d7eed9e03e53415d37aa96045",
        "alice": "0x" + "a1" * 20,
    })


@pytest.fixture
def engine(ledger, names, governance):
    return IntentsEngine(
        ledger,
        names,
        address=default_engine_address(),
        governance=governance,
        factory=UNISWAP_V3_FACTORY,
        init_code_hash=UNISWAP_V3_POOL_INIT_CODE_HASH,
        wrapped_native=WETH,
    )


@pytest.fixture
def dai_weth_pool(ledger):
    """Curated DAI/WETH pool holding 100 WETH against 250,000 DAI."""

    address, fee = CURATED_POOLS[(DAI.lower(), WETH.lower())]
    pool = ledger.deploy_pool(
        DAI, WETH, fee,
        factory=UNISWAP_V3_FACTORY,
        init_code_hash=UNISWAP_V3_POOL_INIT_CODE_HASH,
        address=address,
    )
    ledger.mint(WETH, pool.address, 100 * 10**18)
    ledger.mint(DAI, pool.address, 250_000 * 10**18)
    return pool
