import asyncio
from enum import Enum
from typing import Awaitable, Callable, TypeVar

from modules.exceptions import DuplicateSubmissionError, SubmissionError
from modules.logger import logger

R = TypeVar("R")


class ChunkState(Enum):
    PENDING = "pending"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    FAILED = "failed"


class SubmissionTracker:
    """
    Per-chunk submission state for one loaded transfer list.

    pending -> submitting -> submitted, a failed submission goes back to
    pending so the chunk can be retried by hand. `reset` starts over for a new
    list; submissions still in flight for the old list are then ignored.
    """

    def __init__(self, chunk_count: int = 0):
        self._generation = 0
        self._states: list[ChunkState] = []
        self.last_errors: dict[int, BaseException] = {}
        self.reset(chunk_count)

    def __len__(self):
        return len(self._states)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def submitted(self) -> frozenset[int]:
        return frozenset(i for i, state in enumerate(self._states) if state is ChunkState.SUBMITTED)

    def state(self, index: int) -> ChunkState:
        self._check_index(index)
        return self._states[index]

    def states(self) -> list[ChunkState]:
        return list(self._states)

    def display_state(self, index: int) -> ChunkState:
        """
        Like `state`, but a pending chunk whose last attempt failed reads as FAILED.
        """
        state = self.state(index)
        if state is ChunkState.PENDING and index in self.last_errors:
            return ChunkState.FAILED
        return state

    def reset(self, chunk_count: int) -> None:
        self._generation += 1
        self._states = [ChunkState.PENDING] * chunk_count
        self.last_errors = {}

    def begin(self, index: int) -> int:
        """
        Mark the chunk as submitting, returns the generation it belongs to.
        """
        state = self.state(index)
        if state is not ChunkState.PENDING:
            raise DuplicateSubmissionError(index, state)

        self._states[index] = ChunkState.SUBMITTING
        self.last_errors.pop(index, None)
        return self._generation

    def confirm(self, index: int, generation: int = None) -> bool:
        if not self._is_current(index, generation):
            return False

        self._states[index] = ChunkState.SUBMITTED
        return True

    def fail(self, index: int, error: BaseException, generation: int = None) -> bool:
        if not self._is_current(index, generation):
            return False

        self.last_errors[index] = error
        self._states[index] = ChunkState.PENDING
        return True

    async def run(self, index: int, operation: Callable[[], Awaitable[R]]) -> R:
        generation = self.begin(index)

        try:
            result = await operation()
        except asyncio.CancelledError as err:
            self.fail(index, err, generation)
            raise
        except Exception as err:
            self.fail(index, err, generation)
            logger.error(f"Chunk {index + 1} | Submission failed: {err}")
            raise SubmissionError(index, str(err)) from err

        if not self.confirm(index, generation):
            logger.warning(f"Chunk {index + 1} | Transfer list changed while submitting, result dropped")

        return result

    def _is_current(self, index: int, generation: int = None) -> bool:
        if generation is not None and generation != self._generation:
            return False
        return self.state(index) is ChunkState.SUBMITTING

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._states):
            raise IndexError(f"No chunk {index + 1}, there are {len(self._states)} chunks")
