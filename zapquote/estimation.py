"""Swap-size estimation for deposit zaps.

The zap contract decides on chain how much of the user's input to swap
before adding liquidity. Asking the contract itself (estimateSwap) keeps the
quote and the executed transaction in agreement, so its answer is taken as
ground truth by the deposit composer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog
from web3 import AsyncWeb3

from zapquote.errors import EstimationFailure
from zapquote.models.types import address_key, normalize_address

logger = structlog.get_logger()


class SwapEstimator(Protocol):
    """Protocol for swap-size estimators."""

    async def estimate_swap(
        self,
        zap_address: str,
        vault_address: str,
        token_in: str,
        amount_in: int,
        block_identifier: int | None = None,
    ) -> int:
        """Estimate how much of amount_in the zap will swap.

        Args:
            zap_address: Zap contract address
            vault_address: Vault the zap deposits into
            token_in: Token the user provides (wrapped form for native)
            amount_in: The user's full input amount in base units
            block_identifier: Block to estimate at (None = latest)

        Returns:
            Portion of amount_in routed through the swap leg, in base units

        Raises:
            EstimationFailure: If no usable estimate is available
        """
        ...


def parse_estimate(raw: Any) -> int:
    """Extract the swap amount from an estimateSwap result.

    The contract returns (swapAmountIn, swapAmountOut, swapTokenOut); only the
    first element is used.

    Raises:
        EstimationFailure: If the result is empty or not a non-negative integer
    """
    if raw is None:
        raise EstimationFailure("Failed to estimate swap: empty result")
    value = raw[0] if isinstance(raw, (list, tuple)) else raw
    if isinstance(value, bool):
        raise EstimationFailure(f"Failed to estimate swap: invalid estimate {value!r}")
    try:
        amount = int(value)
    except (TypeError, ValueError) as err:
        raise EstimationFailure(f"Failed to estimate swap: invalid estimate {value!r}") from err
    if amount < 0:
        raise EstimationFailure(f"Failed to estimate swap: negative estimate {amount}")
    return amount


@dataclass
class MockSwapEstimator:
    """Estimator returning configured values, for tests and offline quotes.

    Usage:
        # Same estimate for every request
        estimator = MockSwapEstimator(default=400)

        # Estimate as a fraction of the input: amount_in * num // denom
        estimator = MockSwapEstimator(default_rate=(1, 2))

        # Per-token estimates
        estimator = MockSwapEstimator(estimates={(token, 1000): 400})
    """

    estimates: dict[tuple[str, int], int | None] = field(default_factory=dict)
    default: int | None = None
    default_rate: tuple[int, int] | None = None
    calls: list[tuple[str, str, str, int]] = field(default_factory=list)
    block_identifiers: list[int | None] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.estimates = {
            (address_key(token), amount): estimate
            for (token, amount), estimate in self.estimates.items()
        }

    async def estimate_swap(
        self,
        zap_address: str,
        vault_address: str,
        token_in: str,
        amount_in: int,
        block_identifier: int | None = None,
    ) -> int:
        self.calls.append(
            (
                normalize_address(zap_address),
                normalize_address(vault_address),
                normalize_address(token_in),
                amount_in,
            )
        )
        self.block_identifiers.append(block_identifier)
        key = (address_key(token_in), amount_in)
        if key in self.estimates:
            return parse_estimate(self.estimates[key])
        if self.default is not None:
            return parse_estimate(self.default)
        if self.default_rate is not None:
            num, denom = self.default_rate
            return amount_in * num // denom
        raise EstimationFailure(f"Failed to estimate swap: no estimate for {token_in}")


# Zap contract ABI - minimal, just estimateSwap
ZAP_ESTIMATE_SWAP_ABI = [
    {
        "name": "estimateSwap",
        "type": "function",
        "stateMutability": "view",
        "inputs": [
            {"name": "beefyVault", "type": "address"},
            {"name": "tokenIn", "type": "address"},
            {"name": "fullInvestmentIn", "type": "uint256"},
        ],
        "outputs": [
            {"name": "swapAmountIn", "type": "uint256"},
            {"name": "swapAmountOut", "type": "uint256"},
            {"name": "swapTokenOut", "type": "address"},
        ],
    },
]


class Web3ZapSwapEstimator:
    """Estimator that calls the zap contract's estimateSwap via RPC."""

    def __init__(self, web3_provider: str | AsyncWeb3) -> None:
        """Initialize estimator.

        Args:
            web3_provider: HTTP RPC URL or an already configured AsyncWeb3
        """
        if isinstance(web3_provider, str):
            self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(web3_provider))
        else:
            self.w3 = web3_provider

    async def estimate_swap(
        self,
        zap_address: str,
        vault_address: str,
        token_in: str,
        amount_in: int,
        block_identifier: int | None = None,
    ) -> int:
        zap = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(zap_address),
            abi=ZAP_ESTIMATE_SWAP_ABI,
        )
        try:
            result = await zap.functions.estimateSwap(
                AsyncWeb3.to_checksum_address(vault_address),
                AsyncWeb3.to_checksum_address(token_in),
                amount_in,
            ).call(block_identifier=block_identifier)
        except Exception as e:
            logger.warning(
                "estimate_swap_failed",
                zap=zap_address,
                vault=vault_address,
                token_in=token_in,
                amount_in=amount_in,
                block=block_identifier,
                error=str(e),
            )
            raise EstimationFailure(f"Failed to estimate swap on {zap_address}") from e

        return parse_estimate(result)


__all__ = [
    "SwapEstimator",
    "MockSwapEstimator",
    "Web3ZapSwapEstimator",
    "parse_estimate",
    "ZAP_ESTIMATE_SWAP_ABI",
]
