"""Pydantic models for zap configuration and quotes."""

from zapquote.models.token import Token, TokenType
from zapquote.models.types import (
    Address,
    AddressKey,
    Uint256,
    address_key,
    normalize_address,
)
from zapquote.models.option import UniswapV2AmmConfig, Vault, ZapContract, ZapOption
from zapquote.models.quote import (
    Allowance,
    AmountQuote,
    BuildStep,
    DepositStep,
    QuoteStep,
    SplitStep,
    SwapStep,
    ZapQuote,
)

__all__ = [
    # Types
    "Address",
    "AddressKey",
    "Uint256",
    "address_key",
    "normalize_address",
    # Tokens
    "Token",
    "TokenType",
    # Configuration
    "UniswapV2AmmConfig",
    "Vault",
    "ZapContract",
    "ZapOption",
    # Quotes
    "AmountQuote",
    "Allowance",
    "SwapStep",
    "BuildStep",
    "DepositStep",
    "SplitStep",
    "QuoteStep",
    "ZapQuote",
]
