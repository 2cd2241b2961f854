"""Pytest configuration and fixtures."""

import pytest

from zapquote.amm.reader import StaticPoolStateReader
from zapquote.estimation import MockSwapEstimator
from zapquote.providers.uniswap_v2 import UniswapV2ZapProvider
from tests.helpers import USDC_WETH_PAIR, make_option, make_pool_state, make_vault


@pytest.fixture
def option():
    """USDC/WETH zap option on mainnet UniswapV2."""
    return make_option()


@pytest.fixture
def vault():
    """Vault holding the USDC/WETH LP token."""
    return make_vault()


@pytest.fixture
def pool_reader() -> StaticPoolStateReader:
    """Reader serving a realistic USDC/WETH pool state."""
    return StaticPoolStateReader(states={USDC_WETH_PAIR: make_pool_state()})


@pytest.fixture
def half_estimator() -> MockSwapEstimator:
    """Estimator that swaps half of every input."""
    return MockSwapEstimator(default_rate=(1, 2))


@pytest.fixture
def provider(half_estimator, pool_reader) -> UniswapV2ZapProvider:
    """UniswapV2 provider backed by in-memory estimates and reserves."""
    return UniswapV2ZapProvider(estimator=half_estimator, reader=pool_reader)
