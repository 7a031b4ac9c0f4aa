from abc import ABC, abstractmethod
from typing import Optional


class IdentifierMapRepository(ABC):
    """
    Repository interface - side index from external identifier to asset key.

    Written at index time so search hits resolve to the exact stored asset
    instead of reversing the lossy identifier sanitization.
    """

    @abstractmethod
    async def claim(self, collection_id: str, external_id: str, asset_key: str) -> str:
        """
        Bind external_id to asset_key unless already bound.
        Returns the asset key that owns external_id after the call.
        """
        pass

    @abstractmethod
    async def resolve(self, collection_id: str, external_id: str) -> Optional[str]:
        """Return the asset key bound to external_id, or None"""
        pass
