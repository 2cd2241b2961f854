"""Deposit and withdraw zap quotes for UniswapV2-style LP vaults."""

from zapquote.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapquote.errors import (
    EstimateExceedsInput,
    EstimationFailure,
    TokenResolutionFailure,
    ZapQuoteError,
)
from zapquote.models import Token, Vault, ZapOption, ZapQuote
from zapquote.providers import UniswapV2ZapProvider, create_web3_provider

__version__ = "0.1.0"
__all__ = [
    "ZapConfig",
    "DEFAULT_ZAP_CONFIG",
    "ZapQuoteError",
    "EstimationFailure",
    "EstimateExceedsInput",
    "TokenResolutionFailure",
    "Token",
    "Vault",
    "ZapOption",
    "ZapQuote",
    "UniswapV2ZapProvider",
    "create_web3_provider",
    "__version__",
]
