from abc import ABC, abstractmethod
from typing import List, Optional
from ..models.attendee import AttendeeRecord


class AttendeeRepository(ABC):
    """Repository interface - defines contract for attendee record access"""

    @abstractmethod
    async def find(self, user_id: str, collection_id: str) -> Optional[AttendeeRecord]:
        """Find the record of a (user, collection) pair"""
        pass

    @abstractmethod
    async def find_by_user(self, user_id: str) -> List[AttendeeRecord]:
        """Find all records of a user, across collections"""
        pass

    @abstractmethod
    async def save(self, record: AttendeeRecord) -> AttendeeRecord:
        """Save record (create or replace the (user, collection) document)"""
        pass

    @abstractmethod
    async def set_selfie_for_user(self, user_id: str, selfie_ref: str) -> int:
        """Point every record of a user at a new selfie, returns the number updated"""
        pass
