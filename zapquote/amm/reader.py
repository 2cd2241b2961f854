"""Pool state readers.

A reader fetches the full reserve state of a pair in one go, every field read
at the same block. The pool model swaps that state in on refresh(); it never
patches individual fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

import structlog
from web3 import AsyncWeb3

from zapquote.helpers.tasks import run_concurrently
from zapquote.models.types import address_key, normalize_address

logger = structlog.get_logger()


@dataclass(frozen=True)
class PoolState:
    """Snapshot of a UniswapV2 pair."""

    token0: str
    token1: str
    reserve0: int
    reserve1: int
    total_supply: int
    # Block the snapshot was read at (None when not pinned)
    block_number: int | None = None

    def __post_init__(self) -> None:
        if self.reserve0 < 0 or self.reserve1 < 0 or self.total_supply < 0:
            raise ValueError(f"Pool state cannot hold negative amounts: {self}")


class PoolStateReader(Protocol):
    """Protocol for reading pair state.

    This allows swapping between a real RPC reader and a static reader for
    tests and offline quoting.
    """

    async def latest_block(self) -> int | None:
        """Current block number, or None if the reader cannot pin reads to a block."""
        ...

    async def read_pool_state(
        self, pair_address: str, block_identifier: int | None = None
    ) -> PoolState:
        """Read token order, reserves and LP total supply of a pair.

        Args:
            pair_address: Pair (LP token) address
            block_identifier: Block to read at. If None, the reader picks one
                block itself; all fields always come from the same block.

        Raises:
            Exception: Any RPC failure; readers do not retry
        """
        ...


@dataclass
class StaticPoolStateReader:
    """Reader serving pool states from memory.

    States are keyed by pair address (any case). Calls and the blocks they
    asked for are recorded so tests can assert that a refresh happened.
    """

    states: dict[str, PoolState] = field(default_factory=dict)
    block_number: int | None = None
    calls: list[str] = field(default_factory=list)
    block_identifiers: list[int | None] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.states = {address_key(addr): state for addr, state in self.states.items()}

    def set_state(self, pair_address: str, state: PoolState) -> None:
        self.states[address_key(pair_address)] = state

    async def latest_block(self) -> int | None:
        return self.block_number

    async def read_pool_state(
        self, pair_address: str, block_identifier: int | None = None
    ) -> PoolState:
        self.calls.append(normalize_address(pair_address))
        self.block_identifiers.append(block_identifier)
        try:
            return self.states[address_key(pair_address)]
        except KeyError as err:
            raise LookupError(f"No pool state for pair {pair_address}") from err


# Minimal UniswapV2 pair ABI, just the views we need
UNISWAP_V2_PAIR_ABI = [
    {
        "name": "getReserves",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [
            {"name": "reserve0", "type": "uint112"},
            {"name": "reserve1", "type": "uint112"},
            {"name": "blockTimestampLast", "type": "uint32"},
        ],
    },
    {
        "name": "totalSupply",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "name": "token0",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
    {
        "name": "token1",
        "type": "function",
        "stateMutability": "view",
        "inputs": [],
        "outputs": [{"name": "", "type": "address"}],
    },
]


class Web3PoolStateReader:
    """Reader that calls the pair contract via RPC.

    The four view calls are issued concurrently, pinned to one block, and all
    must succeed.
    """

    def __init__(self, web3_provider: str | AsyncWeb3) -> None:
        """Initialize reader.

        Args:
            web3_provider: HTTP RPC URL or an already configured AsyncWeb3
        """
        if isinstance(web3_provider, str):
            self.w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(web3_provider))
        else:
            self.w3 = web3_provider

    async def latest_block(self) -> int:
        return await self.w3.eth.block_number

    async def read_pool_state(
        self, pair_address: str, block_identifier: int | None = None
    ) -> PoolState:
        pair = self.w3.eth.contract(
            address=AsyncWeb3.to_checksum_address(pair_address),
            abi=UNISWAP_V2_PAIR_ABI,
        )
        try:
            if block_identifier is None:
                block_identifier = await self.latest_block()
            reserves, total_supply, token0, token1 = await run_concurrently(
                pair.functions.getReserves().call(block_identifier=block_identifier),
                pair.functions.totalSupply().call(block_identifier=block_identifier),
                pair.functions.token0().call(block_identifier=block_identifier),
                pair.functions.token1().call(block_identifier=block_identifier),
            )
        except Exception as e:
            logger.warning(
                "pool_state_read_failed",
                pair=pair_address,
                block=block_identifier,
                error=str(e),
            )
            raise

        return PoolState(
            token0=normalize_address(token0),
            token1=normalize_address(token1),
            reserve0=int(reserves[0]),
            reserve1=int(reserves[1]),
            total_supply=int(total_supply),
            block_number=block_identifier,
        )


__all__ = [
    "PoolState",
    "PoolStateReader",
    "StaticPoolStateReader",
    "Web3PoolStateReader",
    "UNISWAP_V2_PAIR_ABI",
]
