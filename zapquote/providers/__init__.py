"""Zap quote providers, one per AMM type."""

from zapquote.providers.base import (
    PRICE_PER_FULL_SHARE_SCALE,
    BaseZapProvider,
    DepositQuoteRequest,
    WithdrawQuoteRequest,
)
from zapquote.providers.uniswap_v2 import UniswapV2ZapProvider, create_web3_provider

__all__ = [
    "BaseZapProvider",
    "DepositQuoteRequest",
    "WithdrawQuoteRequest",
    "PRICE_PER_FULL_SHARE_SCALE",
    "UniswapV2ZapProvider",
    "create_web3_provider",
]
