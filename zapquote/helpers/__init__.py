"""Boundary helpers: amount formatting, native substitution, quote ids, concurrent reads."""

from zapquote.helpers.big_number import from_wei
from zapquote.helpers.quote_id import create_quote_id
from zapquote.helpers.tasks import run_concurrently
from zapquote.helpers.tokens import is_token_erc20, native_to_wnative, wnative_to_native

__all__ = [
    "from_wei",
    "create_quote_id",
    "run_concurrently",
    "is_token_erc20",
    "native_to_wnative",
    "wnative_to_native",
]
