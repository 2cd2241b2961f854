"""Tests for deposit zap quotes."""

import asyncio
from dataclasses import dataclass
from decimal import Decimal

import pytest

from zapquote.amm.base import AddLiquidityResult
from zapquote.amm.reader import StaticPoolStateReader
from zapquote.config import ZapConfig
from zapquote.errors import EstimateExceedsInput, EstimationFailure, TokenResolutionFailure
from zapquote.estimation import MockSwapEstimator
from zapquote.models.quote import BuildStep, DepositStep, SwapStep
from zapquote.providers.uniswap_v2 import UniswapV2ZapProvider
from tests.helpers import (
    DAI,
    DAI_WETH_PAIR,
    ETH,
    MockPool,
    USDC,
    USDC_WETH_PAIR,
    VAULT_ADDRESS,
    WETH,
    ZAP_ADDRESS,
    make_pool_state,
    make_token,
    make_vault,
)

usdc = make_token(USDC, symbol="USDC")
eth = make_token(ETH, symbol="ETH", native=True)


def make_scripted_pool() -> MockPool:
    """400 USDC swaps to 390 WETH at 1% impact; 600 USDC + 385 WETH mint 500 LP."""
    return MockPool(
        swap_out=390,
        swap_impact=Decimal("0.01"),
        add_result=AddLiquidityResult(
            add_amount_a=600, add_amount_b=385, liquidity=500, return_amount_b=5
        ),
    )


def make_provider(estimator: MockSwapEstimator, config: ZapConfig | None = None):
    return UniswapV2ZapProvider(
        estimator=estimator,
        reader=StaticPoolStateReader(),
        config=config or ZapConfig(),
    )


class FailingSwapEstimator:
    """Estimator that yields once, so sibling reads start, then fails."""

    async def estimate_swap(
        self, zap_address, vault_address, token_in, amount_in, block_identifier=None
    ):
        await asyncio.sleep(0)
        raise EstimationFailure("execution reverted")


@dataclass
class SlowRefreshPool(MockPool):
    """Pool whose refresh waits on the network until cancelled."""

    cancelled: bool = False

    async def refresh(self, block_identifier: int | None = None) -> None:
        try:
            await asyncio.sleep(10)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        await super().refresh(block_identifier)


class TestDepositComposition:
    """Deposit with a scripted pool: estimate 400 of 1000 USDC."""

    def quote(self, option, vault, pool, config=None):
        provider = make_provider(MockSwapEstimator(default=400), config=config)
        return asyncio.run(provider.get_deposit_quote(option, vault, usdc, 1000, pool=pool))

    def test_steps_in_execution_order(self, option, vault):
        quote = self.quote(option, vault, make_scripted_pool())

        assert quote.step_types == ["swap", "build", "deposit"]
        swap, build, deposit = quote.steps
        assert isinstance(swap, SwapStep)
        assert isinstance(build, BuildStep)
        assert isinstance(deposit, DepositStep)

    def test_swap_step(self, option, vault):
        swap = self.quote(option, vault, make_scripted_pool()).steps[0]

        assert swap.from_token.same_as(USDC)
        assert swap.from_amount_wei == 400
        assert swap.to_token.same_as(WETH)
        assert swap.to_amount_wei == 390
        assert swap.price_impact == Decimal("0.01")

    def test_build_step_uses_amounts_taken(self, option, vault):
        """Build inputs are what addLiquidity takes, not what was offered."""
        build = self.quote(option, vault, make_scripted_pool()).steps[1]

        assert [(a.token.symbol, a.amount_wei) for a in build.inputs] == [
            ("USDC", 600),
            ("WETH", 385),
        ]
        assert build.output_token.same_as(USDC_WETH_PAIR)
        assert build.output_amount_wei == 500

    def test_outputs_and_deposit(self, option, vault):
        quote = self.quote(option, vault, make_scripted_pool())

        assert [(o.token, o.amount_wei) for o in quote.outputs] == [(vault.deposit_token, 500)]
        assert quote.steps[2].token == vault.deposit_token
        assert quote.steps[2].amount_wei == 500
        assert quote.price_impact == Decimal("0.01")

    def test_inputs_and_allowance(self, option, vault):
        quote = self.quote(option, vault, make_scripted_pool())

        assert [(i.token, i.amount_wei) for i in quote.inputs] == [(usdc, 1000)]
        assert len(quote.allowances) == 1
        allowance = quote.allowances[0]
        assert allowance.token == usdc
        assert allowance.amount_wei == 1000
        assert allowance.spender_address == ZAP_ADDRESS

    def test_swap_updates_reserves_before_add(self, option, vault):
        """Liquidity is added against the post-swap pool with the rest of the input."""
        pool = make_scripted_pool()

        self.quote(option, vault, pool)

        assert pool.calls == [
            ("swap", 400, USDC, True),
            ("add_liquidity", 600, USDC, 390),
        ]

    def test_supplied_pool_is_not_refreshed(self, option, vault):
        pool = make_scripted_pool()

        self.quote(option, vault, pool)

        assert pool.refresh_count == 0

    def test_refresh_on_deposit(self, option, vault):
        pool = make_scripted_pool()

        self.quote(option, vault, pool, config=ZapConfig(refresh_on_deposit=True))

        assert pool.refresh_count == 1
        assert pool.call_names == ["refresh", "swap", "add_liquidity"]

    def test_refresh_and_estimate_share_a_block(self, option, vault):
        """The estimate and the refreshed reserves describe the same block."""
        estimator = MockSwapEstimator(default=400)
        pool = make_scripted_pool()
        provider = UniswapV2ZapProvider(
            estimator=estimator,
            reader=StaticPoolStateReader(block_number=123),
            config=ZapConfig(refresh_on_deposit=True),
        )

        asyncio.run(provider.get_deposit_quote(option, vault, usdc, 1000, pool=pool))

        assert estimator.block_identifiers == [123]
        assert pool.refresh_blocks == [123]

    def test_quote_id_scoped_to_option(self, option, vault):
        quote = self.quote(option, vault, make_scripted_pool())

        assert quote.option_id == option.id
        assert quote.id.startswith(f"{option.id}-")

    def test_zero_swap(self, option, vault):
        """An estimate of zero still yields a swap step, with zero impact."""
        pool = MockPool(add_result=AddLiquidityResult(1000, 0, 0, return_amount_a=0))
        provider = make_provider(MockSwapEstimator(default=0))

        quote = asyncio.run(provider.get_deposit_quote(option, vault, usdc, 1000, pool=pool))

        assert quote.step_types == ["swap", "build", "deposit"]
        assert quote.steps[0].from_amount_wei == 0
        assert quote.price_impact == 0
        assert pool.calls[1] == ("add_liquidity", 1000, USDC, 0)


class TestDepositFailures:
    def test_estimate_exceeds_input(self, option, vault):
        pool = make_scripted_pool()
        provider = make_provider(MockSwapEstimator(default=1500))

        with pytest.raises(EstimateExceedsInput):
            asyncio.run(provider.get_deposit_quote(option, vault, usdc, 1000, pool=pool))
        assert pool.calls == []

    def test_estimate_equal_to_input(self, option, vault):
        pool = MockPool(swap_out=980, add_result=AddLiquidityResult(0, 0, 0))
        provider = make_provider(MockSwapEstimator(default=1000))

        asyncio.run(provider.get_deposit_quote(option, vault, usdc, 1000, pool=pool))

        assert pool.calls[1] == ("add_liquidity", 0, USDC, 980)

    def test_estimator_failure_propagates(self, option, vault):
        provider = make_provider(MockSwapEstimator())

        with pytest.raises(EstimationFailure):
            asyncio.run(
                provider.get_deposit_quote(option, vault, usdc, 1000, pool=make_scripted_pool())
            )

    def test_empty_estimate(self, option, vault):
        provider = make_provider(MockSwapEstimator(estimates={(USDC, 1000): None}))

        with pytest.raises(EstimationFailure):
            asyncio.run(
                provider.get_deposit_quote(option, vault, usdc, 1000, pool=make_scripted_pool())
            )

    def test_token_not_in_pool(self, option, vault):
        provider = make_provider(MockSwapEstimator(default=400))

        with pytest.raises(TokenResolutionFailure):
            asyncio.run(
                provider.get_deposit_quote(
                    option, vault, make_token(DAI), 1000, pool=make_scripted_pool()
                )
            )

    def test_unsupported_vault(self, option):
        """A vault whose LP is not this option's pair gets no quote."""
        estimator = MockSwapEstimator(default=400)
        provider = make_provider(estimator)

        quote = asyncio.run(
            provider.get_deposit_quote(
                option, make_vault(DAI_WETH_PAIR), usdc, 1000, pool=make_scripted_pool()
            )
        )

        assert quote is None
        assert estimator.calls == []


    def test_estimate_failure_cancels_refresh(self, option, vault):
        """A failed estimate cancels the concurrent refresh and surfaces unwrapped."""
        pool = SlowRefreshPool()
        provider = UniswapV2ZapProvider(
            estimator=FailingSwapEstimator(),
            reader=StaticPoolStateReader(),
            config=ZapConfig(refresh_on_deposit=True),
        )

        with pytest.raises(EstimationFailure):
            asyncio.run(provider.get_deposit_quote(option, vault, usdc, 1000, pool=pool))
        assert pool.cancelled
        assert pool.calls == []


class TestNativeDeposit:
    def test_native_input(self, option, vault):
        """Native input is estimated and swapped as the wrapped token."""
        estimator = MockSwapEstimator(default=400)
        pool = make_scripted_pool()
        provider = make_provider(estimator)

        quote = asyncio.run(provider.get_deposit_quote(option, vault, eth, 1000, pool=pool))

        assert estimator.calls == [(ZAP_ADDRESS, VAULT_ADDRESS, WETH, 1000)]
        assert quote.inputs[0].token == eth
        assert quote.allowances == ()
        assert quote.steps[0].from_token.same_as(WETH)
        assert quote.steps[0].to_token.same_as(USDC)
        assert pool.calls[0] == ("swap", 400, WETH, True)


class TestDepositAgainstPoolState:
    """Deposit through the real pool model, refreshed from the reader."""

    def test_usdc_deposit(self, provider, pool_reader, half_estimator, option, vault):
        amount = 1_000 * 10**6

        quote = asyncio.run(provider.get_deposit_quote(option, vault, usdc, amount))

        assert pool_reader.calls == [USDC_WETH_PAIR]
        assert half_estimator.calls == [(ZAP_ADDRESS, VAULT_ADDRESS, USDC, amount)]
        swap, build, deposit = quote.steps
        assert swap.from_amount_wei == amount // 2
        assert swap.to_amount_wei > 0
        assert 0 < quote.price_impact < Decimal("0.001")
        # Nothing beyond the user's input is spent
        assert swap.from_amount_wei + build.inputs[0].amount_wei <= amount
        assert build.inputs[1].amount_wei <= swap.to_amount_wei
        assert quote.outputs[0].amount_wei == build.output_amount_wei == deposit.amount_wei
        assert deposit.amount_wei > 0

    def test_native_deposit(self, provider, option, vault):
        quote = asyncio.run(provider.get_deposit_quote(option, vault, eth, 10**18))

        assert quote.allowances == ()
        assert quote.steps[0].from_token.same_as(WETH)
        assert quote.outputs[0].amount_wei > 0

    def test_reads_pinned_to_reader_block(self, half_estimator, option, vault):
        reader = StaticPoolStateReader(states={USDC_WETH_PAIR: make_pool_state()}, block_number=123)
        provider = UniswapV2ZapProvider(estimator=half_estimator, reader=reader)

        asyncio.run(provider.get_deposit_quote(option, vault, usdc, 1_000 * 10**6))

        assert reader.block_identifiers == [123]
        assert half_estimator.block_identifiers == [123]
