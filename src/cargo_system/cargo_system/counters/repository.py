from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CounterState


class CounterRepository(Protocol):
    def allocate(self, *, key: str, prefix: str, seed_last: int) -> int:
        """Atomically compute max(seed_last, current) + 1, store it and return it."""

        raise NotImplementedError

    def get(self, key: str) -> Optional[CounterState]:
        raise NotImplementedError

    def set_value(self, *, key: str, prefix: str, value: int) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[CounterState]:
        raise NotImplementedError
