"""Tests for provider configuration."""

import pytest

from zapquote.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapquote.estimation import Web3ZapSwapEstimator
from zapquote.amm.reader import Web3PoolStateReader
from zapquote.providers.uniswap_v2 import create_web3_provider


class TestZapConfig:
    def test_defaults(self):
        assert DEFAULT_ZAP_CONFIG.rpc_url is None
        assert DEFAULT_ZAP_CONFIG.refresh_on_deposit is False
        assert DEFAULT_ZAP_CONFIG.default_fee_bps == 30

    def test_rejects_out_of_range_fee(self):
        with pytest.raises(ValueError, match="default_fee_bps"):
            ZapConfig(default_fee_bps=10_000)
        with pytest.raises(ValueError, match="default_fee_bps"):
            ZapConfig(default_fee_bps=-1)

    def test_from_env(self, monkeypatch):
        """Environment variables override the defaults."""
        monkeypatch.setenv("ZAP_RPC_URL", "http://localhost:8545")
        monkeypatch.setenv("ZAP_REFRESH_ON_DEPOSIT", "True")
        monkeypatch.setenv("ZAP_DEFAULT_FEE_BPS", "25")

        config = ZapConfig.from_env()

        assert config.rpc_url == "http://localhost:8545"
        assert config.refresh_on_deposit is True
        assert config.default_fee_bps == 25

    def test_from_env_unset(self, monkeypatch):
        monkeypatch.delenv("ZAP_RPC_URL", raising=False)
        monkeypatch.delenv("ZAP_REFRESH_ON_DEPOSIT", raising=False)
        monkeypatch.delenv("ZAP_DEFAULT_FEE_BPS", raising=False)

        assert ZapConfig.from_env() == ZapConfig()


class TestCreateWeb3Provider:
    def test_requires_rpc_url(self):
        with pytest.raises(ValueError, match="RPC URL"):
            create_web3_provider(ZapConfig())

    def test_wires_web3_backends(self):
        """Estimator and reader share one web3 client."""
        provider = create_web3_provider(ZapConfig(rpc_url="http://localhost:8545"))

        assert isinstance(provider.estimator, Web3ZapSwapEstimator)
        assert isinstance(provider.reader, Web3PoolStateReader)
        assert provider.estimator.w3 is provider.reader.w3
        assert provider.get_id() == "zap-uniswapv2"
