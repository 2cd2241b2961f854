"""Configuration for zap quoting."""

from __future__ import annotations

import os
from dataclasses import dataclass

from zapquote.constants import DEFAULT_FEE_BPS

_TRUE_VALUES = ("true", "1", "yes")


@dataclass(frozen=True)
class ZapConfig:
    """Centralized configuration for zap providers.

    Attributes:
        rpc_url: HTTP RPC endpoint used by the web3 readers (None = not configured)
        refresh_on_deposit: If True, deposit quotes refresh the pool concurrently
            with the swap estimate. If False, the caller must hand in a pool
            that is already refreshed.
        default_fee_bps: Swap fee used for pools whose AMM config has no fee
    """

    rpc_url: str | None = None
    refresh_on_deposit: bool = False
    default_fee_bps: int = DEFAULT_FEE_BPS

    def __post_init__(self) -> None:
        if not 0 <= self.default_fee_bps < 10_000:
            raise ValueError(f"default_fee_bps must be in [0, 10000): {self.default_fee_bps}")

    @classmethod
    def from_env(cls) -> ZapConfig:
        """Build a config from environment variables.

        - ZAP_RPC_URL: RPC endpoint (default: unset)
        - ZAP_REFRESH_ON_DEPOSIT: refresh pools on deposit quotes (default: false)
        - ZAP_DEFAULT_FEE_BPS: default swap fee in bps (default: 30)
        """
        return cls(
            rpc_url=os.environ.get("ZAP_RPC_URL") or None,
            refresh_on_deposit=os.environ.get("ZAP_REFRESH_ON_DEPOSIT", "false").lower()
            in _TRUE_VALUES,
            default_fee_bps=int(os.environ.get("ZAP_DEFAULT_FEE_BPS", str(DEFAULT_FEE_BPS))),
        )


# Default configuration instance
DEFAULT_ZAP_CONFIG = ZapConfig()
