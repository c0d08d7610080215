"""
Metadata Store interface
Flat key-value namespace: exact-key get/put/delete and ordered prefix scan
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

Record = Dict[str, Any]


def key_order(key: str) -> bytes:
    """Sort key for ascending lexicographic byte order."""
    return key.encode("utf-8")


class MetadataStore(ABC):
    """Base class for metadata store backends"""

    @abstractmethod
    async def put(self, key: str, value: Record) -> None:
        """Write value at key, replacing any existing value (last writer wins)"""
        pass

    @abstractmethod
    async def put_if_absent(self, key: str, value: Record) -> bool:
        """Atomically write value only if key holds nothing; True if this call wrote it"""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[Record]:
        """Most recent value at key, or None if never written or deleted"""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Remove key; True if it existed"""
        pass

    @abstractmethod
    async def scan_prefix_items(self, prefix: str) -> List[Tuple[str, Record]]:
        """(key, value) pairs whose key starts with prefix, ascending by key bytes"""
        pass

    async def scan_prefix(self, prefix: str) -> List[Record]:
        """Values whose key starts with prefix, ascending by key bytes"""
        return [value for _, value in await self.scan_prefix_items(prefix)]

    async def init(self) -> None:
        """Prepare backend resources (schema, connections)"""
        return None

    async def close(self) -> None:
        """Release backend resources"""
        return None
