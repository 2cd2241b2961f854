"""UniswapV2 pool model.

UniswapV2 uses the constant product formula: x * y = k
With a fee (0.3% by default) taken from input amounts.

The pool model reproduces the pair and router arithmetic exactly, in
integer base units, so a simulated quote matches what the zap contract
will do against the same reserves.
"""

from __future__ import annotations

import decimal
from dataclasses import dataclass, replace
from decimal import Decimal

import structlog
from eth_abi.packed import encode_packed
from eth_utils import keccak

from zapquote.amm.base import AddLiquidityResult, PoolModel, RemoveLiquidityResult, SwapResult
from zapquote.amm.reader import PoolState, PoolStateReader
from zapquote.config import DEFAULT_ZAP_CONFIG, ZapConfig
from zapquote.constants import BPS_DENOMINATOR, DEFAULT_FEE_BPS, MINIMUM_LIQUIDITY
from zapquote.helpers.big_number import DECIMAL_HIGH_PREC_CONTEXT
from zapquote.models.option import UniswapV2AmmConfig
from zapquote.models.types import address_key, is_valid_address, normalize_address
from zapquote.safe_int import S

logger = structlog.get_logger()


def compute_pair_address(
    factory_address: str,
    pair_init_hash: str,
    token_a: str,
    token_b: str,
) -> str:
    """Derive a pair address the way the factory's CREATE2 deploy does.

    Tokens are sorted first, so the result does not depend on argument order.

    Args:
        factory_address: UniswapV2 factory address
        pair_init_hash: keccak of the pair creation bytecode (0x-prefixed)
        token_a: One constituent token address
        token_b: The other constituent token address

    Returns:
        Lowercase pair address

    Raises:
        ValueError: If any address is invalid or the tokens are identical
    """
    for name, addr in (("factory", factory_address), ("token_a", token_a), ("token_b", token_b)):
        if not is_valid_address(addr):
            raise ValueError(f"Invalid {name} address: {addr}")
    token0, token1 = sort_tokens(token_a, token_b)

    salt = keccak(encode_packed(["address", "address"], [token0, token1]))
    raw = keccak(
        encode_packed(
            ["bytes1", "address", "bytes32", "bytes32"],
            [b"\xff", normalize_address(factory_address), salt, bytes.fromhex(pair_init_hash[2:])],
        )
    )
    return "0x" + raw[12:].hex()


def sort_tokens(token_a: str, token_b: str) -> tuple[str, str]:
    """Order two tokens as the pair stores them (ascending by address bytes).

    Raises:
        ValueError: If both addresses are the same token
    """
    key_a, key_b = address_key(token_a), address_key(token_b)
    if key_a == key_b:
        raise ValueError(f"Identical token addresses: {token_a}")
    if int(key_a, 16) < int(key_b, 16):
        return key_a, key_b
    return key_b, key_a


class UniswapV2:
    """UniswapV2 pair and router math.

    Formula: amount_out = (amount_in * fee * reserve_out) / (reserve_in * 10000 + amount_in * fee)

    where fee = 10000 - fee_bps (9970 for the standard 0.3%).
    """

    def get_amount_out(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        fee_multiplier: int = 9970,
    ) -> int:
        """Calculate output amount using constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool
            fee_multiplier: 10000 - fee_bps

        Returns:
            Output token amount (0 for empty input or an empty pool)
        """
        if amount_in <= 0:
            return 0
        if reserve_in <= 0 or reserve_out <= 0:
            return 0

        amount_in_with_fee = S(amount_in) * S(fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(BPS_DENOMINATOR) + amount_in_with_fee

        return (numerator // denominator).value

    def price_impact(
        self,
        amount_in: int,
        reserve_in: int,
        fee_multiplier: int = 9970,
    ) -> Decimal:
        """Fraction by which the execution price falls short of the mid price.

        The swap fee is not counted as impact. For an input x after fee and
        reserve r, impact = x / (r + x).
        """
        if amount_in <= 0 or reserve_in <= 0:
            return Decimal(0)
        amount_in_with_fee = amount_in * fee_multiplier
        with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
            return Decimal(amount_in_with_fee) / Decimal(
                reserve_in * BPS_DENOMINATOR + amount_in_with_fee
            )

    def quote(self, amount_a: int, reserve_a: int, reserve_b: int) -> int:
        """Amount of B worth amount_a of A at the current reserve ratio (router quote).

        Raises:
            DivisionByZero: If reserve_a is zero
        """
        return (S(amount_a) * S(reserve_b) // S(reserve_a)).value

    def optimal_amounts(
        self,
        amount_a_desired: int,
        amount_b_desired: int,
        reserve_a: int,
        reserve_b: int,
    ) -> tuple[int, int]:
        """Amounts addLiquidity actually takes, matching the pool ratio.

        Mirrors the router: keep all of A if the matching B is available,
        otherwise keep all of B and take the matching A.
        """
        if reserve_a == 0 and reserve_b == 0:
            return amount_a_desired, amount_b_desired
        amount_b_optimal = self.quote(amount_a_desired, reserve_a, reserve_b)
        if amount_b_optimal <= amount_b_desired:
            return amount_a_desired, amount_b_optimal
        amount_a_optimal = self.quote(amount_b_desired, reserve_b, reserve_a)
        return amount_a_optimal, amount_b_desired

    def liquidity_minted(
        self,
        amount_a: int,
        amount_b: int,
        reserve_a: int,
        reserve_b: int,
        total_supply: int,
    ) -> int:
        """LP tokens the pair mints for the given deposit.

        The first deposit mints sqrt(a * b) minus the permanently locked
        MINIMUM_LIQUIDITY; a deposit too small for that mints nothing.
        """
        if total_supply == 0:
            minted = (S(amount_a) * S(amount_b)).sqrt().value - MINIMUM_LIQUIDITY
            return max(minted, 0)
        if reserve_a == 0 or reserve_b == 0:
            return 0
        liquidity_a = S(amount_a) * S(total_supply) // S(reserve_a)
        liquidity_b = S(amount_b) * S(total_supply) // S(reserve_b)
        return liquidity_a.min(liquidity_b).value


# Singleton instance
uniswap_v2 = UniswapV2()


@dataclass
class UniswapV2Pool(PoolModel):
    """A UniswapV2 pair with a local copy of its reserve state.

    The state is None until the first refresh(); simulating before that is
    a programming error and raises RuntimeError.
    """

    address: str
    reader: PoolStateReader
    # Fee in basis points (30 = 0.3%)
    fee_bps: int = DEFAULT_FEE_BPS
    state: PoolState | None = None

    def __post_init__(self) -> None:
        self.address = normalize_address(self.address, validate=True)

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for AMM math (10000 - fee_bps)."""
        return BPS_DENOMINATOR - self.fee_bps

    def _require_state(self) -> PoolState:
        if self.state is None:
            raise RuntimeError(f"Pool {self.address} has not been refreshed")
        return self.state

    async def refresh(self, block_identifier: int | None = None) -> None:
        state = await self.reader.read_pool_state(self.address, block_identifier)
        logger.debug(
            "pool_refreshed",
            pool=self.address,
            block=state.block_number,
            reserve0=state.reserve0,
            reserve1=state.reserve1,
            total_supply=state.total_supply,
        )
        self.state = state

    @property
    def token0(self) -> str:
        return self._require_state().token0

    @property
    def token1(self) -> str:
        return self._require_state().token1

    def get_reserves(self, token_in: str) -> tuple[int, int]:
        """Get reserves ordered as (reserve_in, reserve_out)."""
        state = self._require_state()
        token_in_key = address_key(token_in)
        if token_in_key == address_key(state.token0):
            return state.reserve0, state.reserve1
        elif token_in_key == address_key(state.token1):
            return state.reserve1, state.reserve0
        else:
            raise ValueError(f"Token {token_in} not in pool {self.address}")

    def get_token_out(self, token_in: str) -> str:
        """Get the output token for a given input token."""
        state = self._require_state()
        token_in_key = address_key(token_in)
        if token_in_key == address_key(state.token0):
            return state.token1
        elif token_in_key == address_key(state.token1):
            return state.token0
        else:
            raise ValueError(f"Token {token_in} not in pool {self.address}")

    def swap(self, amount_in: int, token_in: str, update_reserves: bool = False) -> SwapResult:
        state = self._require_state()
        reserve_in, reserve_out = self.get_reserves(token_in)
        token_out = self.get_token_out(token_in)
        amount_out = uniswap_v2.get_amount_out(
            amount_in, reserve_in, reserve_out, self.fee_multiplier
        )
        price_impact = uniswap_v2.price_impact(amount_in, reserve_in, self.fee_multiplier)

        if update_reserves:
            new_in = (S(reserve_in) + S(amount_in)).value
            new_out = (S(reserve_out) - S(amount_out)).value
            if address_key(token_in) == address_key(state.token0):
                self.state = replace(state, reserve0=new_in, reserve1=new_out)
            else:
                self.state = replace(state, reserve0=new_out, reserve1=new_in)

        return SwapResult(
            amount_in=amount_in,
            amount_out=amount_out,
            token_in=normalize_address(token_in),
            token_out=token_out,
            price_impact=price_impact,
        )

    def add_liquidity(self, amount_a: int, token_a: str, amount_b: int) -> AddLiquidityResult:
        state = self._require_state()
        reserve_a, reserve_b = self.get_reserves(token_a)
        add_a, add_b = uniswap_v2.optimal_amounts(amount_a, amount_b, reserve_a, reserve_b)
        liquidity = uniswap_v2.liquidity_minted(
            add_a, add_b, reserve_a, reserve_b, state.total_supply
        )
        return AddLiquidityResult(
            add_amount_a=add_a,
            add_amount_b=add_b,
            liquidity=liquidity,
            return_amount_a=(S(amount_a) - S(add_a)).value,
            return_amount_b=(S(amount_b) - S(add_b)).value,
        )

    def remove_liquidity(
        self, liquidity: int, update_reserves: bool = False
    ) -> RemoveLiquidityResult:
        """Simulate burning liquidity.

        Raises:
            ValueError: If liquidity exceeds the LP total supply
        """
        state = self._require_state()
        if liquidity > state.total_supply:
            raise ValueError(
                f"Cannot remove {liquidity} LP from pool {self.address} "
                f"with total supply {state.total_supply}"
            )
        if state.total_supply == 0:
            amount0 = amount1 = 0
        else:
            amount0 = (S(liquidity) * S(state.reserve0) // S(state.total_supply)).value
            amount1 = (S(liquidity) * S(state.reserve1) // S(state.total_supply)).value

        if update_reserves:
            self.state = replace(
                state,
                reserve0=(S(state.reserve0) - S(amount0)).value,
                reserve1=(S(state.reserve1) - S(amount1)).value,
                total_supply=(S(state.total_supply) - S(liquidity)).value,
            )

        return RemoveLiquidityResult(
            amount0=amount0,
            amount1=amount1,
            token0=state.token0,
            token1=state.token1,
        )


def get_pool(
    pair_address: str,
    amm: UniswapV2AmmConfig,
    reader: PoolStateReader,
    config: ZapConfig = DEFAULT_ZAP_CONFIG,
) -> UniswapV2Pool:
    """Create an (unrefreshed) pool model for a pair of the given AMM."""
    fee_bps = amm.swap_fee_bps if amm.swap_fee_bps is not None else config.default_fee_bps
    return UniswapV2Pool(address=pair_address, reader=reader, fee_bps=fee_bps)


__all__ = [
    "UniswapV2",
    "UniswapV2Pool",
    "uniswap_v2",
    "compute_pair_address",
    "sort_tokens",
    "get_pool",
]
