"""In-process metadata store backend."""
import copy
import logging
from bisect import bisect_left, insort
from threading import Lock
from typing import Dict, List, Optional, Tuple

from sheetlens.store.base import MetadataStore, Record, key_order

logger = logging.getLogger(__name__)


class MemoryMetadataStore(MetadataStore):
    """
    Dict of records plus a sorted list of encoded keys for prefix scans.

    Values are deep-copied on the way in and out so callers never share
    mutable state with the store. A threading lock (not an asyncio one) guards
    the critical sections: none of them await, and the store may be touched
    from more than one event loop.
    """

    def __init__(self):
        self._data: Dict[str, Record] = {}
        self._order: List[bytes] = []
        self._lock = Lock()

    async def put(self, key: str, value: Record) -> None:
        stored = copy.deepcopy(value)
        with self._lock:
            if key not in self._data:
                insort(self._order, key_order(key))
            self._data[key] = stored

    async def put_if_absent(self, key: str, value: Record) -> bool:
        stored = copy.deepcopy(value)
        with self._lock:
            if key in self._data:
                return False
            insort(self._order, key_order(key))
            self._data[key] = stored
        return True

    async def get(self, key: str) -> Optional[Record]:
        with self._lock:
            value = self._data.get(key)
        return copy.deepcopy(value) if value is not None else None

    async def delete(self, key: str) -> bool:
        with self._lock:
            if key not in self._data:
                return False
            del self._data[key]
            encoded = key_order(key)
            self._order.pop(bisect_left(self._order, encoded))
        return True

    async def scan_prefix_items(self, prefix: str) -> List[Tuple[str, Record]]:
        encoded_prefix = key_order(prefix)
        with self._lock:
            items = []
            for encoded in self._order[bisect_left(self._order, encoded_prefix):]:
                if not encoded.startswith(encoded_prefix):
                    break
                key = encoded.decode("utf-8")
                items.append((key, self._data[key]))
        return [(key, copy.deepcopy(value)) for key, value in items]

    def __len__(self) -> int:
        return len(self._data)
