"""UniswapV2 pair arithmetic constants."""

# LP tokens permanently locked by the pair on the first mint
MINIMUM_LIQUIDITY = 1000

# Standard UniswapV2 swap fee in basis points (0.3%)
DEFAULT_FEE_BPS = 30
BPS_DENOMINATOR = 10_000
