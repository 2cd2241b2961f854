"""Test helpers module for shared test utilities.

- constants: Token and contract addresses
- factories: Token, option, vault and pool state factory functions
- mock_pool: Scripted pool model recording its calls
"""

from tests.helpers.constants import (
    DAI,
    DAI_WETH_PAIR,
    ETH,
    TOKEN_DECIMALS,
    UNISWAP_V2_FACTORY,
    UNISWAP_V2_PAIR_INIT_HASH,
    USDC,
    USDC_WETH_PAIR,
    VAULT_ADDRESS,
    WETH,
    ZAP_ADDRESS,
)
from tests.helpers.factories import (
    make_amm,
    make_option,
    make_pool_state,
    make_token,
    make_vault,
)
from tests.helpers.mock_pool import MockPool

__all__ = [
    # Constants
    "WETH",
    "USDC",
    "DAI",
    "ETH",
    "UNISWAP_V2_FACTORY",
    "UNISWAP_V2_PAIR_INIT_HASH",
    "USDC_WETH_PAIR",
    "DAI_WETH_PAIR",
    "ZAP_ADDRESS",
    "VAULT_ADDRESS",
    "TOKEN_DECIMALS",
    # Factories
    "make_token",
    "make_amm",
    "make_option",
    "make_vault",
    "make_pool_state",
    # Mocks
    "MockPool",
]
