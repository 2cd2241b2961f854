"""Pydantic models for zap quotes.

A ZapQuote is the immutable result handed to a presentation layer. Amount
fields hold integer base units; each one has a decimal counterpart computed
from the token's decimals, which is what gets displayed.

Steps form a closed union discriminated on ``type``:
- swap: one token exchanged for the other through the pool
- build: two tokens combined into LP (addLiquidity)
- deposit: LP deposited into the vault
- split: LP redeemed for its two constituents (removeLiquidity)
"""

from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Literal

from pydantic import BaseModel, Field, computed_field, model_validator

from zapquote.helpers.big_number import from_wei
from zapquote.models.token import Token
from zapquote.models.types import Address, Uint256

_MODEL_CONFIG = {"frozen": True, "populate_by_name": True}


class AmountQuote(BaseModel):
    """A token and an amount of it."""

    token: Token
    amount_wei: Uint256 = Field(alias="amountWei")

    model_config = _MODEL_CONFIG

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> Decimal:
        return from_wei(self.amount_wei, self.token.decimals)


class Allowance(BaseModel):
    """An ERC20 approval the user must hold before the zap can execute."""

    token: Token
    amount_wei: Uint256 = Field(alias="amountWei")
    spender_address: Address = Field(alias="spenderAddress")

    model_config = _MODEL_CONFIG

    @model_validator(mode="after")
    def _erc20_only(self) -> Allowance:
        if not self.token.is_erc20:
            raise ValueError(f"Allowance requires an ERC20 token, got {self.token.type.value}")
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> Decimal:
        return from_wei(self.amount_wei, self.token.decimals)


class SwapStep(BaseModel):
    """Swap through the pool."""

    type: Literal["swap"] = "swap"
    from_token: Token = Field(alias="fromToken")
    from_amount_wei: Uint256 = Field(alias="fromAmountWei")
    to_token: Token = Field(alias="toToken")
    to_amount_wei: Uint256 = Field(alias="toAmountWei")
    price_impact: Decimal = Field(alias="priceImpact")

    model_config = _MODEL_CONFIG

    @computed_field(alias="fromAmount")  # type: ignore[prop-decorator]
    @property
    def from_amount(self) -> Decimal:
        return from_wei(self.from_amount_wei, self.from_token.decimals)

    @computed_field(alias="toAmount")  # type: ignore[prop-decorator]
    @property
    def to_amount(self) -> Decimal:
        return from_wei(self.to_amount_wei, self.to_token.decimals)


class BuildStep(BaseModel):
    """Add liquidity: both inputs are the amounts the pool actually takes."""

    type: Literal["build"] = "build"
    inputs: tuple[AmountQuote, ...]
    output_token: Token = Field(alias="outputToken")
    output_amount_wei: Uint256 = Field(alias="outputAmountWei")

    model_config = _MODEL_CONFIG

    @computed_field(alias="outputAmount")  # type: ignore[prop-decorator]
    @property
    def output_amount(self) -> Decimal:
        return from_wei(self.output_amount_wei, self.output_token.decimals)


class DepositStep(BaseModel):
    """Deposit LP into the vault."""

    type: Literal["deposit"] = "deposit"
    token: Token
    amount_wei: Uint256 = Field(alias="amountWei")

    model_config = _MODEL_CONFIG

    @computed_field  # type: ignore[prop-decorator]
    @property
    def amount(self) -> Decimal:
        return from_wei(self.amount_wei, self.token.decimals)


class SplitStep(BaseModel):
    """Remove liquidity: LP redeemed for both pool constituents."""

    type: Literal["split"] = "split"
    input_token: Token = Field(alias="inputToken")
    input_amount_wei: Uint256 = Field(alias="inputAmountWei")
    outputs: tuple[AmountQuote, ...]

    model_config = _MODEL_CONFIG

    @computed_field(alias="inputAmount")  # type: ignore[prop-decorator]
    @property
    def input_amount(self) -> Decimal:
        return from_wei(self.input_amount_wei, self.input_token.decimals)


QuoteStep = Annotated[
    SwapStep | BuildStep | DepositStep | SplitStep,
    Field(discriminator="type"),
]


class ZapQuote(BaseModel):
    """A complete, self-consistent zap quote.

    Steps are in on-chain execution order. The quote's price impact is the
    impact of its swap step, or zero when there is none.
    """

    id: str
    option_id: str = Field(alias="optionId")
    type: Literal["zap"] = "zap"
    allowances: tuple[Allowance, ...] = ()
    inputs: tuple[AmountQuote, ...]
    outputs: tuple[AmountQuote, ...]
    price_impact: Decimal = Field(alias="priceImpact")
    steps: tuple[QuoteStep, ...] = Field(min_length=1)

    model_config = _MODEL_CONFIG

    @model_validator(mode="after")
    def _check_price_impact(self) -> ZapQuote:
        swaps = [step for step in self.steps if isinstance(step, SwapStep)]
        if len(swaps) > 1:
            raise ValueError(f"A zap quote has at most one swap step, got {len(swaps)}")
        expected = swaps[0].price_impact if swaps else Decimal(0)
        if self.price_impact != expected:
            raise ValueError(
                f"Quote price impact {self.price_impact} does not match swap step {expected}"
            )
        return self

    @property
    def step_types(self) -> list[str]:
        """Step tags in execution order, e.g. ['swap', 'build', 'deposit']."""
        return [step.type for step in self.steps]


__all__ = [
    "AmountQuote",
    "Allowance",
    "SwapStep",
    "BuildStep",
    "DepositStep",
    "SplitStep",
    "QuoteStep",
    "ZapQuote",
]
