"""Pool models for zap quoting."""

from zapquote.amm.base import AddLiquidityResult, PoolModel, RemoveLiquidityResult, SwapResult
from zapquote.amm.reader import (
    PoolState,
    PoolStateReader,
    StaticPoolStateReader,
    Web3PoolStateReader,
)
from zapquote.amm.uniswap_v2 import (
    UniswapV2,
    UniswapV2Pool,
    compute_pair_address,
    get_pool,
    sort_tokens,
    uniswap_v2,
)

__all__ = [
    # Base classes
    "PoolModel",
    "SwapResult",
    "AddLiquidityResult",
    "RemoveLiquidityResult",
    # State readers
    "PoolState",
    "PoolStateReader",
    "StaticPoolStateReader",
    "Web3PoolStateReader",
    # UniswapV2
    "UniswapV2",
    "UniswapV2Pool",
    "uniswap_v2",
    "compute_pair_address",
    "sort_tokens",
    "get_pool",
]
