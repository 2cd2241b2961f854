"""Native / wrapped-native token substitution.

Pools only ever hold the wrapped form of the native asset. These helpers map
between the two forms at the edges of a quote and never touch pool state.
"""

from zapquote.models.token import Token


def is_token_erc20(token: Token) -> bool:
    """True if spending the token requires an ERC20 allowance."""
    return token.is_erc20


def wnative_to_native(token: Token, wnative: Token, native: Token) -> Token:
    """Report the wrapped native token as the native asset; pass others through."""
    if token.same_as(wnative):
        return native
    return token


def native_to_wnative(token: Token, native: Token, wnative: Token) -> Token:
    """Map the native asset to the token the pool actually holds."""
    if token.is_native or token.same_as(native):
        return wnative
    return token


__all__ = [
    "is_token_erc20",
    "wnative_to_native",
    "native_to_wnative",
]
