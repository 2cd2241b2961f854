"""Base class for zap quote providers.

A provider knows one AMM type. The base class turns a user request (input
token and amount, or shares and wanted token) into the fully resolved request
its composers work on; subclasses implement pool selection and the two
composers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

from zapquote.amm.base import PoolModel
from zapquote.amm.reader import PoolStateReader
from zapquote.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapquote.constants import BPS_DENOMINATOR
from zapquote.errors import TokenResolutionFailure
from zapquote.estimation import SwapEstimator
from zapquote.helpers.tokens import native_to_wnative
from zapquote.models.option import Vault, ZapOption
from zapquote.models.quote import AmountQuote, ZapQuote
from zapquote.models.token import Token
from zapquote.safe_int import S

logger = structlog.get_logger()

# Vault share price scale (pricePerFullShare is 1e18-based)
PRICE_PER_FULL_SHARE_SCALE = 10**18

AmmT = TypeVar("AmmT")


@dataclass(frozen=True)
class DepositQuoteRequest:
    """Everything a deposit composer needs.

    Attributes:
        option: Zap option being quoted
        vault: Target vault (its deposit token is the LP token)
        pool: Pool model of the LP pair
        deposit_token: The LP token
        swap_token_in: Token the user provides, wrapped form for native
        swap_token_out: The other LP constituent
        user_amount_in_wei: Full user input in base units
        amounts: User inputs as entered (native stays native)
        refresh_pool: Refresh the pool concurrently with the swap estimate,
            both read at the same block. When False the pool must already be
            fresh.
    """

    option: ZapOption
    vault: Vault
    pool: PoolModel
    deposit_token: Token
    swap_token_in: Token
    swap_token_out: Token
    user_amount_in_wei: int
    amounts: tuple[AmountQuote, ...]
    refresh_pool: bool = False


@dataclass(frozen=True)
class WithdrawQuoteRequest:
    """Everything a withdraw composer needs.

    Attributes:
        option: Zap option being quoted
        vault: Source vault
        pool: Pool model of the LP pair (always refreshed by the composer)
        withdrawn_token: The LP token
        withdrawn_amount_after_fee_wei: LP amount that gets split, after vault fee
        share_token: Vault share token being redeemed
        shares_to_withdraw_wei: Shares redeemed, in base units
        actual_token_out: Token the user asked for (None = both constituents)
        swap_token_in: Constituent swapped away (None = split only)
        swap_token_out: Constituent swapped into (None = split only)
        amounts: User inputs as entered
    """

    option: ZapOption
    vault: Vault
    pool: PoolModel
    withdrawn_token: Token
    withdrawn_amount_after_fee_wei: int
    share_token: Token
    shares_to_withdraw_wei: int
    actual_token_out: Token | None
    swap_token_in: Token | None
    swap_token_out: Token | None
    amounts: tuple[AmountQuote, ...]

    @property
    def native(self) -> Token:
        return self.option.native

    @property
    def wnative(self) -> Token:
        return self.option.wnative


class BaseZapProvider(ABC, Generic[AmmT]):
    """Quote deposits into and withdrawals from LP vaults through a zap contract."""

    def __init__(
        self,
        type_: str,
        estimator: SwapEstimator,
        reader: PoolStateReader,
        config: ZapConfig = DEFAULT_ZAP_CONFIG,
    ) -> None:
        self.type = type_
        self.estimator = estimator
        self.reader = reader
        self.config = config

    def get_id(self) -> str:
        return f"zap-{self.type}"

    @abstractmethod
    def get_amm(
        self,
        amms: list[AmmT],
        deposit_token_address: str,
        lp_tokens: tuple[Token, Token],
    ) -> AmmT | None:
        """Find the AMM whose pair for lp_tokens is the deposit token, if any."""
        ...

    @abstractmethod
    def create_pool(self, option: ZapOption, pair_address: str) -> PoolModel:
        """Create an unrefreshed pool model for the option's pair."""
        ...

    @abstractmethod
    async def get_deposit_quote_for_type(self, request: DepositQuoteRequest) -> ZapQuote:
        ...

    @abstractmethod
    async def get_withdraw_quote_for_type(self, request: WithdrawQuoteRequest) -> ZapQuote:
        ...

    def _supports(self, option: ZapOption, vault: Vault) -> bool:
        amm = self.get_amm([option.amm], vault.deposit_token.address, option.lp_tokens)
        if amm is None:
            logger.info(
                "zap_pool_not_found",
                provider=self.get_id(),
                option_id=option.id,
                deposit_token=vault.deposit_token.address,
            )
            return False
        return True

    def _resolve_lp_pair(self, option: ZapOption, token: Token) -> tuple[Token, Token]:
        """Return (matching constituent, other constituent) for a user token.

        The native asset resolves to the wrapped native constituent.

        Raises:
            TokenResolutionFailure: If the token is not one of the LP tokens
        """
        wrapped = native_to_wnative(token, option.native, option.wnative)
        lp_a, lp_b = option.lp_tokens
        if lp_a.same_as(wrapped):
            return lp_a, lp_b
        if lp_b.same_as(wrapped):
            return lp_b, lp_a
        raise TokenResolutionFailure(
            f"Token {token.address} is not a constituent of option {option.id}"
        )

    async def get_deposit_quote(
        self,
        option: ZapOption,
        vault: Vault,
        input_token: Token,
        input_amount_wei: int,
        pool: PoolModel | None = None,
    ) -> ZapQuote | None:
        """Quote zapping input_amount_wei of input_token into the vault.

        Args:
            option: Zap option for the vault
            vault: Target vault
            input_token: Token the user deposits (an LP constituent or native)
            input_amount_wei: Amount in base units
            pool: Already refreshed pool model to reuse. When omitted a pool is
                created and refreshed together with the swap estimate.

        Returns:
            The quote, or None if no configured AMM matches the vault's LP

        Raises:
            TokenResolutionFailure: If input_token is not a pool constituent
            EstimationFailure: If the zap contract gives no usable estimate
        """
        if not self._supports(option, vault):
            return None

        swap_token_in, swap_token_out = self._resolve_lp_pair(option, input_token)
        logger.debug(
            "deposit_quote_requested",
            provider=self.get_id(),
            option_id=option.id,
            swap_token_in=swap_token_in.address,
            swap_token_out=swap_token_out.address,
            user_amount_in=input_amount_wei,
        )

        refresh_pool = pool is None or self.config.refresh_on_deposit
        if pool is None:
            pool = self.create_pool(option, vault.deposit_token.address)

        request = DepositQuoteRequest(
            option=option,
            vault=vault,
            pool=pool,
            deposit_token=vault.deposit_token,
            swap_token_in=swap_token_in,
            swap_token_out=swap_token_out,
            user_amount_in_wei=input_amount_wei,
            amounts=(AmountQuote(token=input_token, amount_wei=input_amount_wei),),
            refresh_pool=refresh_pool,
        )
        return await self.get_deposit_quote_for_type(request)

    async def get_withdraw_quote(
        self,
        option: ZapOption,
        vault: Vault,
        shares_to_withdraw_wei: int,
        wanted_token: Token | None = None,
        price_per_full_share: int = PRICE_PER_FULL_SHARE_SCALE,
        pool: PoolModel | None = None,
    ) -> ZapQuote | None:
        """Quote redeeming vault shares into one or both LP constituents.

        Args:
            option: Zap option for the vault
            vault: Source vault
            shares_to_withdraw_wei: Shares to redeem, in base units
            wanted_token: Single token to end up with (a constituent or
                native), or None to receive both constituents
            price_per_full_share: LP per share, scaled by 1e18
            pool: Pool model to use; it is refreshed regardless

        Returns:
            The quote, or None if no configured AMM matches the vault's LP

        Raises:
            TokenResolutionFailure: If wanted_token is not a pool constituent
        """
        if not self._supports(option, vault):
            return None

        withdrawn_amount_wei = (
            S(shares_to_withdraw_wei) * S(price_per_full_share) // S(PRICE_PER_FULL_SHARE_SCALE)
        )
        withdrawn_amount_after_fee_wei = (
            withdrawn_amount_wei * S(BPS_DENOMINATOR - vault.withdraw_fee_bps)
            // S(BPS_DENOMINATOR)
        )

        swap_token_in: Token | None = None
        swap_token_out: Token | None = None
        if wanted_token is not None:
            swap_token_out, swap_token_in = self._resolve_lp_pair(option, wanted_token)

        logger.debug(
            "withdraw_quote_requested",
            provider=self.get_id(),
            option_id=option.id,
            shares=shares_to_withdraw_wei,
            withdrawn_after_fee=withdrawn_amount_after_fee_wei.value,
            wanted_token=wanted_token.address if wanted_token is not None else None,
        )

        if pool is None:
            pool = self.create_pool(option, vault.deposit_token.address)

        request = WithdrawQuoteRequest(
            option=option,
            vault=vault,
            pool=pool,
            withdrawn_token=vault.deposit_token,
            withdrawn_amount_after_fee_wei=withdrawn_amount_after_fee_wei.value,
            share_token=vault.share_token,
            shares_to_withdraw_wei=shares_to_withdraw_wei,
            actual_token_out=wanted_token,
            swap_token_in=swap_token_in,
            swap_token_out=swap_token_out,
            amounts=(
                AmountQuote(token=vault.deposit_token, amount_wei=withdrawn_amount_wei.value),
            ),
        )
        return await self.get_withdraw_quote_for_type(request)


__all__ = [
    "BaseZapProvider",
    "DepositQuoteRequest",
    "WithdrawQuoteRequest",
    "PRICE_PER_FULL_SHARE_SCALE",
]
