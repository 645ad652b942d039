"""Compiled asset, pool and protocol constants (Ethereum mainnet)."""

from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping, Tuple

NATIVE_PLACEHOLDER = "0xEeeeeEeeeEeEeeEeEeEeeEEEeeeeEeeeeeeeEEeE"
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_DECIMALS = 18
NATIVE_SYMBOL = "ETH"

WETH = "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"
USDT = "0xdAC17F958D2ee523a2206206994597C13D831ec7"
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
WBTC = "0x2260FAC5E5542a773Aa44fBCfeDf7C193bc2C599"
WSTETH = "0x7f39C581F595B53c5cb19bD0b3f8dA6c935E2Ca0"
RETH = "0xae78736Cd615f374D3085123A210448E74Fc6393"

# Canonical symbol -> (address, decimals, aliases)
_ASSETS: Dict[str, Tuple[str, int, Tuple[str, ...]]] = {
    'ETH': (NATIVE_PLACEHOLDER, 18, ('eth', 'ether')),
    'WETH': (WETH, 18, ('weth',)),
    'USDC': (USDC, 6, ('usdc',)),
    'USDT': (USDT, 6, ('usdt', 'tether')),
    'DAI': (DAI, 18, ('dai',)),
    'WBTC': (WBTC, 8, ('wbtc', 'btc', 'bitcoin')),
    'WSTETH': (WSTETH, 18, ('wsteth', 'steth', 'lido')),
    'RETH': (RETH, 18, ('reth',)),
}

# alias -> (address, decimals)
BUILTIN_ASSETS: Mapping[str, Tuple[str, int]] = MappingProxyType({
    alias: (address, decimals)
    for address, decimals, aliases in _ASSETS.values()
    for alias in aliases
})

# address (lowercased) -> display symbol
BUILTIN_SYMBOLS: Mapping[str, str] = MappingProxyType({
    address.lower(): symbol for symbol, (address, _, _) in _ASSETS.items()
})

# address (lowercased) -> decimals
BUILTIN_DECIMALS: Mapping[str, int] = MappingProxyType({
    address.lower(): decimals for address, decimals, _ in _ASSETS.values()
})

FEE_TIERS: Tuple[int, ...] = (100, 500, 3000, 10000)

# Uniswap V3 mainnet deployment
UNISWAP_V3_FACTORY = "0x1F98431c8aD98523631AE4a59f267346ea31F984"
UNISWAP_V3_POOL_INIT_CODE_HASH = "0xe34f199b19b2b4f47f68442619d555527d244f78a3297ea89325f843f87b8b54"

# Vetted pools keyed by canonically ordered pair (lowercased) -> (pool, fee)
CURATED_POOLS: Mapping[Tuple[str, str], Tuple[str, int]] = MappingProxyType({
    (USDC.lower(), WETH.lower()): ("0x88e6A0c2dDD26FEEb64F039a2c41296FcB3f5640", 500),
    (DAI.lower(), USDC.lower()): ("0x5777d92f208679DB4b9778590Fa3CAB3aC9e2168", 100),
    (DAI.lower(), WETH.lower()): ("0xC2e9F25Be6257c210d7Adf0D4Cd6E3E881ba25f8", 3000),
    (WBTC.lower(), WETH.lower()): ("0xCBCdF9626bC03E24f779434178A73a0B4bad62eD", 3000),
    (WETH.lower(), USDT.lower()): ("0x4e68Ccd3E89f51C3074ca5072bbAC773960dFa36", 3000),
})

# sqrt(1.0001^tick) * 2^96 bounds, one step inside the valid range
MIN_SQRT_RATIO_PLUS_ONE = 4295128740
MAX_SQRT_RATIO_MINUS_ONE = 1461446703485210103287273052203988822378723970341

# Largest magnitude representable as a positive int256
MAX_INT256 = 2**255 - 1

# Function selectors
ERC20_TRANSFER_SELECTOR = bytes.fromhex("a9059cbb")  # transfer(address,uint256)
EXECUTE_SIGNATURE = "execute(address,uint256,bytes)"
SWAP_SIGNATURE = "swap(address,address,uint256,uint256)"

SEND_ACTIONS: Tuple[str, ...] = (
    'send',
    'transfer',
    'pay',
    'grant',
)

SWAP_ACTIONS: Tuple[str, ...] = (
    'swap',
    'exchange',
    'stake',
    'deposit',
    'unstake',
    'withdraw',
    'trade',
    'convert',
    'sell',
)

__all__ = [
    'NATIVE_PLACEHOLDER',
    'ZERO_ADDRESS',
    'NATIVE_DECIMALS',
    'NATIVE_SYMBOL',
    'WETH',
    'USDC',
    'USDT',
    'DAI',
    'WBTC',
    'WSTETH',
    'RETH',
    'BUILTIN_ASSETS',
    'BUILTIN_SYMBOLS',
    'BUILTIN_DECIMALS',
    'FEE_TIERS',
    'UNISWAP_V3_FACTORY',
    'UNISWAP_V3_POOL_INIT_CODE_HASH',
    'CURATED_POOLS',
    'MIN_SQRT_RATIO_PLUS_ONE',
    'MAX_SQRT_RATIO_MINUS_ONE',
    'MAX_INT256',
    'ERC20_TRANSFER_SELECTOR',
    'EXECUTE_SIGNATURE',
    'SWAP_SIGNATURE',
    'SEND_ACTIONS',
    'SWAP_ACTIONS',
]
