"""Configuration models for vaults, AMMs and zap options."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

from zapquote.models.token import Token
from zapquote.models.types import Address, Bytes32


class UniswapV2AmmConfig(BaseModel):
    """A UniswapV2-style AMM deployment (factory + pair bytecode)."""

    id: str
    type: Literal["uniswapv2"] = "uniswapv2"
    factory_address: Address = Field(alias="factoryAddress")
    pair_init_hash: Bytes32 = Field(alias="pairInitHash")
    # None means "use ZapConfig.default_fee_bps"
    swap_fee_bps: int | None = Field(default=None, ge=0, lt=10_000, alias="swapFeeBps")

    model_config = {"frozen": True, "populate_by_name": True}


class ZapContract(BaseModel):
    """The on-chain zap contract that executes the quoted steps."""

    zap_address: Address = Field(alias="zapAddress")

    model_config = {"frozen": True, "populate_by_name": True}


class Vault(BaseModel):
    """A vault whose deposit token is an LP token."""

    id: str
    earn_contract_address: Address = Field(alias="earnContractAddress")
    deposit_token: Token = Field(alias="depositToken")
    # Vault share token (the vault contract itself for most vaults)
    share_token: Token = Field(alias="shareToken")
    withdraw_fee_bps: int = Field(default=0, ge=0, lt=10_000, alias="withdrawFeeBps")

    model_config = {"frozen": True, "populate_by_name": True}


class ZapOption(BaseModel):
    """A way to zap in or out of a vault through one AMM."""

    id: str
    vault_id: str = Field(alias="vaultId")
    amm: UniswapV2AmmConfig
    zap: ZapContract
    lp_tokens: tuple[Token, Token] = Field(alias="lpTokens")
    wnative: Token
    native: Token

    model_config = {"frozen": True, "populate_by_name": True}

    @model_validator(mode="after")
    def _check_tokens(self) -> "ZapOption":
        if self.lp_tokens[0].same_as(self.lp_tokens[1]):
            raise ValueError("LP tokens must be two distinct tokens")
        if not self.native.is_native:
            raise ValueError("native must be a native token")
        return self

    def find_lp_token(self, address: str) -> Token | None:
        """Look up a configured LP constituent by address (any case)."""
        for token in self.lp_tokens:
            if token.same_as(address):
                return token
        return None


__all__ = ["UniswapV2AmmConfig", "ZapContract", "Vault", "ZapOption"]
