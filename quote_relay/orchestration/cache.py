import time
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    """In-memory cache keyed by uppercased symbol with lazy expiry.

    Entries are only dropped when a read finds them stale; there is no
    background sweep. Concurrent writers on the same key are last-write-wins.
    """

    def __init__(self, ttl_seconds: float = 30.0, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl_seconds
        self._clock = clock
        self._store: Dict[str, Tuple[float, V]] = {}

    @staticmethod
    def _key(symbol: str) -> str:
        return symbol.upper()

    def get(self, symbol: str) -> Optional[V]:
        key = self._key(symbol)
        item = self._store.get(key)
        if item is None:
            return None
        inserted_at, value = item
        if self._clock() - inserted_at >= self.ttl:
            self._store.pop(key, None)
            return None
        return value

    def set(self, symbol: str, value: V) -> None:
        self._store[self._key(symbol)] = (self._clock(), value)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, symbol: Any) -> bool:
        return isinstance(symbol, str) and self.get(symbol) is not None
