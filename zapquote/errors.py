"""Zap quoting error classes.

Every error here aborts the quote being computed. None of them is ever
turned into an empty or zero-impact quote. An unsupported pool pair is
not an error: providers return None for it.
"""


class ZapQuoteError(Exception):
    """Base error for zap quoting."""

    pass


class EstimationFailure(ZapQuoteError):
    """The swap estimator returned no usable estimate."""

    pass


class EstimateExceedsInput(EstimationFailure):
    """The estimated swap amount is larger than the user's input amount."""

    pass


class TokenResolutionFailure(ZapQuoteError):
    """A pool constituent could not be matched to the configured LP tokens."""

    pass


__all__ = [
    "ZapQuoteError",
    "EstimationFailure",
    "EstimateExceedsInput",
    "TokenResolutionFailure",
]
