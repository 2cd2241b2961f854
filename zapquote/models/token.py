"""Token metadata models."""

from enum import Enum

from pydantic import BaseModel, Field

from zapquote.models.types import Address, AddressKey, address_key


class TokenType(str, Enum):
    """How the token is held on chain."""

    ERC20 = "erc20"
    NATIVE = "native"


class Token(BaseModel):
    """Token metadata as configured for a chain.

    Identity is the lowercase address: two Token instances whose addresses
    differ only in letter case refer to the same token.
    """

    address: Address
    # Most tokens use 18 decimals, but some use different values (USDC=6, WBTC=8)
    decimals: int = Field(ge=0, le=77)
    symbol: str | None = None
    type: TokenType = TokenType.ERC20

    model_config = {"frozen": True, "populate_by_name": True}

    @property
    def key(self) -> AddressKey:
        """Normalized address used for comparisons."""
        return address_key(self.address)

    @property
    def is_native(self) -> bool:
        return self.type == TokenType.NATIVE

    @property
    def is_erc20(self) -> bool:
        return self.type == TokenType.ERC20

    def same_as(self, other: "Token | str") -> bool:
        """True if other (a Token or an address) refers to this token."""
        other_key = other.key if isinstance(other, Token) else address_key(other)
        return self.key == other_key
