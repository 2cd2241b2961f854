"""Deposit/withdraw quotes for UniswapV2-type vaults via zap contracts.

Deposit: part of the user's token is swapped for the other constituent, both
are added as liquidity, and the minted LP is deposited into the vault.

Withdraw: the vault's LP is split into both constituents and, if a single
output token was requested, the other constituent is swapped into it.
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from web3 import AsyncWeb3

from zapquote.amm.base import PoolModel
from zapquote.amm.reader import PoolStateReader, Web3PoolStateReader
from zapquote.amm.uniswap_v2 import compute_pair_address, get_pool
from zapquote.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapquote.errors import EstimateExceedsInput, TokenResolutionFailure
from zapquote.estimation import SwapEstimator, Web3ZapSwapEstimator
from zapquote.helpers.quote_id import create_quote_id
from zapquote.helpers.tasks import run_concurrently
from zapquote.helpers.tokens import is_token_erc20, wnative_to_native
from zapquote.models.option import UniswapV2AmmConfig, ZapOption
from zapquote.models.quote import (
    Allowance,
    AmountQuote,
    BuildStep,
    DepositStep,
    SplitStep,
    SwapStep,
    ZapQuote,
)
from zapquote.models.token import Token
from zapquote.models.types import address_key
from zapquote.providers.base import BaseZapProvider, DepositQuoteRequest, WithdrawQuoteRequest
from zapquote.safe_int import S, Underflow

logger = structlog.get_logger()


class UniswapV2ZapProvider(BaseZapProvider[UniswapV2AmmConfig]):
    """Deposit/withdraw to UniswapV2-type vaults via zap contracts."""

    def __init__(
        self,
        estimator: SwapEstimator,
        reader: PoolStateReader,
        config: ZapConfig = DEFAULT_ZAP_CONFIG,
    ) -> None:
        super().__init__("uniswapv2", estimator, reader, config)

    def get_amm(
        self,
        amms: list[UniswapV2AmmConfig],
        deposit_token_address: str,
        lp_tokens: tuple[Token, Token],
    ) -> UniswapV2AmmConfig | None:
        deposit_key = address_key(deposit_token_address)
        matches = [
            amm
            for amm in amms
            if amm.type == self.type
            and deposit_key
            == address_key(
                compute_pair_address(
                    amm.factory_address,
                    amm.pair_init_hash,
                    lp_tokens[0].address,
                    lp_tokens[1].address,
                )
            )
        ]
        if len(matches) > 1:
            logger.debug(
                "ambiguous_amm_match",
                deposit_token=deposit_token_address,
                amm_ids=[amm.id for amm in matches],
                using=matches[0].id,
            )
        return matches[0] if matches else None

    def create_pool(self, option: ZapOption, pair_address: str) -> PoolModel:
        return get_pool(pair_address, option.amm, self.reader, self.config)

    async def get_deposit_quote_for_type(self, request: DepositQuoteRequest) -> ZapQuote:
        option = request.option
        pool = request.pool
        swap_token_in = request.swap_token_in
        swap_token_out = request.swap_token_out
        deposit_token = request.deposit_token
        zap_address = option.zap.zap_address

        logger.debug(
            "deposit_estimate_requested",
            provider=self.get_id(),
            zap=zap_address,
            vault=request.vault.earn_contract_address,
            token_in=swap_token_in.address,
            user_amount_in=request.user_amount_in_wei,
            refresh_pool=request.refresh_pool,
        )

        vault_address = request.vault.earn_contract_address
        if request.refresh_pool:
            # estimate and reserves must describe the same chain state
            block = await self.reader.latest_block()
            swap_amount_in, _ = await run_concurrently(
                self.estimator.estimate_swap(
                    zap_address,
                    vault_address,
                    swap_token_in.address,
                    request.user_amount_in_wei,
                    block_identifier=block,
                ),
                pool.refresh(block_identifier=block),
            )
        else:
            swap_amount_in = await self.estimator.estimate_swap(
                zap_address,
                vault_address,
                swap_token_in.address,
                request.user_amount_in_wei,
            )

        try:
            rest_amount_in = (S(request.user_amount_in_wei) - S(swap_amount_in)).value
        except Underflow as err:
            raise EstimateExceedsInput(
                f"Swap estimate {swap_amount_in} exceeds input {request.user_amount_in_wei}"
            ) from err

        swap = pool.swap(swap_amount_in, swap_token_in.address, update_reserves=True)
        added = pool.add_liquidity(rest_amount_in, swap_token_in.address, swap.amount_out)

        logger.debug(
            "deposit_quote_composed",
            provider=self.get_id(),
            swap_amount_in=swap_amount_in,
            rest_amount_in=rest_amount_in,
            swap_amount_out=swap.amount_out,
            add_amount_in=added.add_amount_a,
            add_amount_out=added.add_amount_b,
            liquidity=added.liquidity,
            price_impact=str(swap.price_impact),
        )

        return ZapQuote(
            id=create_quote_id(option.id),
            option_id=option.id,
            allowances=[
                Allowance(
                    token=amount.token,
                    amount_wei=amount.amount_wei,
                    spender_address=zap_address,
                )
                for amount in request.amounts
                if is_token_erc20(amount.token)
            ],
            inputs=request.amounts,
            outputs=[AmountQuote(token=deposit_token, amount_wei=added.liquidity)],
            price_impact=swap.price_impact,
            steps=[
                SwapStep(
                    from_token=swap_token_in,
                    from_amount_wei=swap_amount_in,
                    to_token=swap_token_out,
                    to_amount_wei=swap.amount_out,
                    price_impact=swap.price_impact,
                ),
                BuildStep(
                    inputs=[
                        AmountQuote(token=swap_token_in, amount_wei=added.add_amount_a),
                        AmountQuote(token=swap_token_out, amount_wei=added.add_amount_b),
                    ],
                    output_token=deposit_token,
                    output_amount_wei=added.liquidity,
                ),
                DepositStep(token=deposit_token, amount_wei=added.liquidity),
            ],
        )

    async def get_withdraw_quote_for_type(self, request: WithdrawQuoteRequest) -> ZapQuote:
        option = request.option
        pool = request.pool
        withdrawn_token = request.withdrawn_token
        zap_address = option.zap.zap_address

        await pool.refresh()

        # withdrawing and splitting lp
        removed = pool.remove_liquidity(
            request.withdrawn_amount_after_fee_wei, update_reserves=True
        )
        withdrawn_token0 = option.find_lp_token(removed.token0)
        withdrawn_token1 = option.find_lp_token(removed.token1)
        if withdrawn_token0 is None or withdrawn_token1 is None:
            raise TokenResolutionFailure(
                f"LP token mismatch: pool {pool.address} holds {removed.token0}/{removed.token1}, "
                f"option {option.id} expects "
                f"{option.lp_tokens[0].address}/{option.lp_tokens[1].address}"
            )

        allowances = [
            Allowance(
                token=request.share_token,
                amount_wei=request.shares_to_withdraw_wei,
                spender_address=zap_address,
            )
        ]

        split_step = SplitStep(
            input_token=withdrawn_token,
            input_amount_wei=request.withdrawn_amount_after_fee_wei,
            outputs=[
                AmountQuote(token=withdrawn_token0, amount_wei=removed.amount0),
                AmountQuote(token=withdrawn_token1, amount_wei=removed.amount1),
            ],
        )

        # split only
        if request.swap_token_in is None:
            logger.debug(
                "withdraw_split_quote_composed",
                provider=self.get_id(),
                amount0=removed.amount0,
                amount1=removed.amount1,
            )
            return ZapQuote(
                id=create_quote_id(option.id),
                option_id=option.id,
                allowances=allowances,
                inputs=request.amounts,
                outputs=[
                    AmountQuote(
                        token=wnative_to_native(withdrawn_token0, request.wnative, request.native),
                        amount_wei=removed.amount0,
                    ),
                    AmountQuote(
                        token=wnative_to_native(withdrawn_token1, request.wnative, request.native),
                        amount_wei=removed.amount1,
                    ),
                ],
                price_impact=Decimal(0),
                steps=[split_step],
            )

        # swap
        swap_token_in = request.swap_token_in
        swap_token_out = request.swap_token_out
        actual_token_out = request.actual_token_out
        if swap_token_out is None or actual_token_out is None:
            raise TokenResolutionFailure(
                "Withdraw swap requires both swap_token_out and a wanted token"
            )

        in_is_token0 = swap_token_in.same_as(removed.token0)
        withdrawn_in = removed.amount0 if in_is_token0 else removed.amount1
        withdrawn_out = removed.amount1 if in_is_token0 else removed.amount0
        swap = pool.swap(withdrawn_in, swap_token_in.address)
        balance_out_after = (S(withdrawn_out) + S(swap.amount_out)).value

        logger.debug(
            "withdraw_swap_quote_composed",
            provider=self.get_id(),
            withdrawn_in=withdrawn_in,
            withdrawn_out=withdrawn_out,
            swap_amount_out=swap.amount_out,
            price_impact=str(swap.price_impact),
        )

        return ZapQuote(
            id=create_quote_id(option.id),
            option_id=option.id,
            allowances=allowances,
            inputs=request.amounts,
            outputs=[AmountQuote(token=actual_token_out, amount_wei=balance_out_after)],
            price_impact=swap.price_impact,
            steps=[
                split_step,
                SwapStep(
                    from_token=swap_token_in,
                    from_amount_wei=withdrawn_in,
                    to_token=swap_token_out,
                    to_amount_wei=swap.amount_out,
                    price_impact=swap.price_impact,
                ),
            ],
        )


def create_web3_provider(config: ZapConfig | None = None) -> UniswapV2ZapProvider:
    """Build a provider that reads estimates and reserves over RPC.

    Args:
        config: Provider configuration. If None, read from the environment.

    Raises:
        ValueError: If no RPC URL is configured
    """
    config = config or ZapConfig.from_env()
    if config.rpc_url is None:
        raise ValueError("No RPC URL configured (set ZAP_RPC_URL)")
    w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(config.rpc_url))
    return UniswapV2ZapProvider(
        estimator=Web3ZapSwapEstimator(w3),
        reader=Web3PoolStateReader(w3),
        config=config,
    )


__all__ = ["UniswapV2ZapProvider", "create_web3_provider"]
