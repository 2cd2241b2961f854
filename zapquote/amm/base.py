"""Base classes for pool models.

The zap composers never do pool math themselves. They see a pool only
through PoolModel, so a different AMM curve can be dropped in by
implementing these four operations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class SwapResult:
    """Result of simulating an exact-input swap."""

    amount_in: int
    amount_out: int
    token_in: str
    token_out: str
    # Fraction of value lost to the trade moving the price (0.01 = 1%)
    price_impact: Decimal


@dataclass(frozen=True)
class AddLiquidityResult:
    """Result of simulating addLiquidity.

    add_amount_a / add_amount_b are what the pool actually takes after
    matching its current ratio. Anything above them is returned to the user.
    """

    add_amount_a: int
    add_amount_b: int
    liquidity: int
    return_amount_a: int = 0
    return_amount_b: int = 0


@dataclass(frozen=True)
class RemoveLiquidityResult:
    """Result of simulating removeLiquidity."""

    amount0: int
    amount1: int
    token0: str
    token1: str


class PoolModel(ABC):
    """A two-asset pool whose reserves can be read and simulated against.

    refresh() replaces the whole reserve state at once. Simulations run
    against whatever state the last refresh left; callers own the instance
    for the duration of a quote and must not share it across concurrent
    requests.
    """

    # Pair (LP token) address
    address: str

    @abstractmethod
    async def refresh(self, block_identifier: int | None = None) -> None:
        """Reload reserves and total supply from chain state.

        Args:
            block_identifier: Block to read at, so the pool can be read at the
                same block as other quote inputs. None lets the reader pick.
        """
        ...

    @abstractmethod
    def swap(self, amount_in: int, token_in: str, update_reserves: bool = False) -> SwapResult:
        """Simulate swapping amount_in of token_in for the other token.

        Args:
            amount_in: Input amount in base units
            token_in: Input token address (any case)
            update_reserves: Apply the swap to the local reserve state so
                later simulations see the post-swap pool

        Raises:
            ValueError: If token_in is not in the pool
        """
        ...

    @abstractmethod
    def add_liquidity(self, amount_a: int, token_a: str, amount_b: int) -> AddLiquidityResult:
        """Simulate adding amount_a of token_a and amount_b of the other token.

        Raises:
            ValueError: If token_a is not in the pool
        """
        ...

    @abstractmethod
    def remove_liquidity(
        self, liquidity: int, update_reserves: bool = False
    ) -> RemoveLiquidityResult:
        """Simulate burning liquidity LP tokens for both constituents."""
        ...


__all__ = ["SwapResult", "AddLiquidityResult", "RemoveLiquidityResult", "PoolModel"]
