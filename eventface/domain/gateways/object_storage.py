from abc import ABC, abstractmethod
from typing import Dict, List, Optional


class ObjectStorage(ABC):
    """Gateway interface - durable object storage addressed by key"""

    @abstractmethod
    async def put(self, key: str, data: bytes, content_type: str) -> None:
        """Store bytes under key (overwrites)"""
        pass

    @abstractmethod
    async def head(self, key: str) -> Optional[Dict[str, object]]:
        """Return object metadata, or None when the key does not exist"""
        pass

    @abstractmethod
    async def get(self, key: str) -> bytes:
        """Read object bytes. Raises AssetNotFound for a missing key"""
        pass

    @abstractmethod
    async def list_keys(self, prefix: str) -> List[str]:
        """List every key under prefix, following pagination"""
        pass

    async def exists(self, key: str) -> bool:
        return await self.head(key) is not None
