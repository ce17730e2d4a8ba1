from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping, Protocol, Sequence

from models.transaction import SubmissionStatus, Transaction
from models.transfer import AssetTransfer, CollectibleTransfer, Transfer, is_asset, is_collectible
from modules.chunking import partition
from modules.logger import logger
from modules.parser import ParseResult, parse_rows, read_csv
from modules.tracker import ChunkState, SubmissionTracker
from modules.transactions import build_asset_transfers, build_collectible_transfers


class CollectiblePlacement(Enum):
    FIRST_CHUNK = "first_chunk"
    STANDALONE = "standalone"


class WalletHost(Protocol):
    async def submit(self, txs: Sequence[Transaction]) -> str: ...

    async def get_status(self, handle: str) -> SubmissionStatus: ...


class AirdropSession:
    """
    The loaded transfer list, how it is chunked, and what has been sent so far.

    Collectibles are scheduled exactly once: either together with the first
    asset chunk or as a separate batch after the last one. With no asset
    transfers they are batch 0 either way.
    """

    def __init__(
        self,
        token_info,
        sender: str,
        max_chunk_size: int = 400,
        decrementing: bool = True,
        placement: CollectiblePlacement = CollectiblePlacement.FIRST_CHUNK,
        strict: bool = None,
    ):
        self.token_info = token_info
        self.sender = sender
        self.max_chunk_size = max_chunk_size
        self.decrementing = decrementing
        self.placement = CollectiblePlacement(placement)
        self.strict = strict

        self.transfers: tuple[Transfer, ...] = ()
        self.chunks: list[list[AssetTransfer]] = []
        self.tracker = SubmissionTracker()

    def load(self, rows: Iterable[Mapping[str, str]]) -> ParseResult:
        result = parse_rows(rows, self.token_info, strict=self.strict)
        self.set_transfers(result.transfers)
        return result

    def load_csv(self, path: str | Path) -> ParseResult:
        logger.info(f"Loading transfers from {path}")
        return self.load(read_csv(path))

    def set_transfers(self, transfers: Iterable[Transfer]) -> None:
        self._rechunk(tuple(transfers), self.max_chunk_size, self.decrementing)

    def set_chunking(self, max_chunk_size: int, decrementing: bool) -> None:
        self._rechunk(self.transfers, max_chunk_size, decrementing)

    def _rechunk(self, transfers: tuple[Transfer, ...], max_chunk_size: int, decrementing: bool) -> None:
        # Partition first, a ChunkConfigurationError leaves the session untouched
        chunks = partition([t for t in transfers if is_asset(t)], max_chunk_size, decrementing)

        self.transfers = transfers
        self.max_chunk_size = max_chunk_size
        self.decrementing = decrementing
        self.chunks = chunks
        self.tracker.reset(self.batch_count)

        if self.collectible_transfers and self.chunks:
            where = "chunk 1" if self.placement is CollectiblePlacement.FIRST_CHUNK else f"batch {self.batch_count}"
            logger.warning(f"{len(self.collectible_transfers)} collectible transfers are sent once, with {where}")

    @property
    def asset_transfers(self) -> list[AssetTransfer]:
        return [t for t in self.transfers if is_asset(t)]

    @property
    def collectible_transfers(self) -> list[CollectibleTransfer]:
        return [t for t in self.transfers if is_collectible(t)]

    @property
    def collectible_batch(self) -> int | None:
        """Index of the batch that carries the collectibles, None when there are none."""
        if not self.collectible_transfers:
            return None
        if not self.chunks or self.placement is CollectiblePlacement.FIRST_CHUNK:
            return 0
        return len(self.chunks)

    @property
    def batch_count(self) -> int:
        standalone = self.collectible_batch is not None and self.collectible_batch == len(self.chunks)
        return len(self.chunks) + int(standalone)

    @property
    def total_amount(self) -> int:
        return sum(t.amount for t in self.asset_transfers)

    def chunk(self, index: int) -> list[AssetTransfer]:
        self.tracker.state(index)  # bounds check
        return self.chunks[index] if index < len(self.chunks) else []

    def state(self, index: int) -> ChunkState:
        return self.tracker.state(index)

    def pending(self) -> list[int]:
        return [i for i, state in enumerate(self.tracker.states()) if state is ChunkState.PENDING]

    def build_bundle(self, index: int) -> list[Transaction]:
        txs = build_asset_transfers(self.chunk(index))

        if index == self.collectible_batch:
            txs.extend(build_collectible_transfers(self.collectible_transfers, self.sender))

        return txs

    async def submit(self, index: int, host: WalletHost) -> SubmissionStatus:
        """
        Submit batch `index` as a single bundle and wait for the host to accept it.
        """
        txs = self.build_bundle(index)

        async def operation() -> SubmissionStatus:
            logger.info(f"Chunk {index + 1} | Submitting {len(txs)} transactions")
            handle = await host.submit(txs)
            status = await host.get_status(handle)
            if not status.accepted:
                raise RuntimeError(f"bundle {handle} was not accepted by the wallet")
            return status

        status = await self.tracker.run(index, operation)
        logger.success(f"Chunk {index + 1} | Submitted {status.tx_hash or ''}")
        return status
