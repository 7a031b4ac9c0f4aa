# Standard library imports
import logging
from typing import Optional, List, Dict, Any

# External package imports
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import PyMongoError

# Local application imports
from ...domain.repositories.attendee_repository import AttendeeRepository
from ...domain.models.attendee import AttendeeRecord
from ...domain.constants import AttendeeFields
from ...domain.exceptions import StoreFailure
from ...utils.datetime_utils import utc_now, ensure_utc
from .mongo_connection import get_attendee_collection

logger = logging.getLogger(__name__)


class MongoAttendeeRepository(AttendeeRepository):
    """MongoDB implementation of AttendeeRepository"""
    
    def __init__(self, attendee_collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self.attendee_collection = (
            attendee_collection if attendee_collection is not None else get_attendee_collection()
        )
    
    async def ensure_indexes(self) -> None:
        """One document per (user, collection)"""
        try:
            await self.attendee_collection.create_index(
                [(AttendeeFields.USER_ID, ASCENDING), (AttendeeFields.COLLECTION_ID, ASCENDING)],
                unique=True,
            )
        except PyMongoError as e:
            raise StoreFailure(f"Error creating attendee indexes: {str(e)}", operation="ensure_indexes")
    
    async def find(self, user_id: str, collection_id: str) -> Optional[AttendeeRecord]:
        """Find the record of a (user, collection) pair"""
        if not user_id or not collection_id:
            return None
        
        try:
            document = await self.attendee_collection.find_one({
                AttendeeFields.USER_ID: user_id,
                AttendeeFields.COLLECTION_ID: collection_id,
            })
        except PyMongoError as e:
            raise StoreFailure(f"Error finding attendee record: {str(e)}", operation="find")
        
        if document is None:
            return None
        return self._document_to_record(document)
    
    async def find_by_user(self, user_id: str) -> List[AttendeeRecord]:
        """Find all records of a user, across collections"""
        if not user_id:
            return []
        
        try:
            cursor = self.attendee_collection.find({AttendeeFields.USER_ID: user_id})
            records = []
            async for document in cursor:
                records.append(self._document_to_record(document))
            return records
        except PyMongoError as e:
            raise StoreFailure(f"Error listing attendee records: {str(e)}", operation="find_by_user")
    
    async def save(self, record: AttendeeRecord) -> AttendeeRecord:
        """Create or replace the (user, collection) document"""
        if not record:
            raise ValueError("Attendee record cannot be None")
        
        record_dict = self._record_to_dict(record)
        record_dict[AttendeeFields.LAST_UPDATED] = utc_now()
        created_at = record_dict.pop(AttendeeFields.CREATED_AT, None) or utc_now()
        
        try:
            document = await self.attendee_collection.find_one_and_update(
                {
                    AttendeeFields.USER_ID: record.user_id,
                    AttendeeFields.COLLECTION_ID: record.collection_id,
                },
                {
                    "$set": record_dict,
                    "$setOnInsert": {AttendeeFields.CREATED_AT: created_at},
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(
                f"Failed to save attendee record user={record.user_id} collection={record.collection_id}: {e}"
            )
            raise StoreFailure(f"Error saving attendee record: {str(e)}", operation="save")
        
        if document is None:
            raise StoreFailure("Attendee record was saved but could not be retrieved", operation="save")
        return self._document_to_record(document)
    
    async def set_selfie_for_user(self, user_id: str, selfie_ref: str) -> int:
        """Point every record of a user at a new selfie"""
        try:
            result = await self.attendee_collection.update_many(
                {AttendeeFields.USER_ID: user_id},
                {"$set": {AttendeeFields.SELFIE_REF: selfie_ref, AttendeeFields.LAST_UPDATED: utc_now()}},
            )
        except PyMongoError as e:
            raise StoreFailure(f"Error updating selfie: {str(e)}", operation="set_selfie_for_user")
        return result.modified_count
    
    def _document_to_record(self, document: Dict[str, Any]) -> AttendeeRecord:
        """Convert MongoDB document to AttendeeRecord domain model"""
        if not document:
            raise ValueError("Invalid document: document is None or empty")
        
        return AttendeeRecord(
            user_id=document.get(AttendeeFields.USER_ID, ""),
            collection_id=document.get(AttendeeFields.COLLECTION_ID, ""),
            selfie_ref=document.get(AttendeeFields.SELFIE_REF, ""),
            matched_images=list(document.get(AttendeeFields.MATCHED_IMAGES) or []),
            matched_videos=list(document.get(AttendeeFields.MATCHED_VIDEOS) or []),
            display_name=document.get(AttendeeFields.DISPLAY_NAME),
            cover_ref=document.get(AttendeeFields.COVER_REF),
            created_at=ensure_utc(document.get(AttendeeFields.CREATED_AT)),
            last_updated=ensure_utc(document.get(AttendeeFields.LAST_UPDATED)),
            has_contributed=bool(document.get(AttendeeFields.HAS_CONTRIBUTED, False)),
        )
    
    def _record_to_dict(self, record: AttendeeRecord) -> Dict[str, Any]:
        """Convert AttendeeRecord domain model to MongoDB document"""
        record_dict: Dict[str, Any] = {
            AttendeeFields.USER_ID: record.user_id,
            AttendeeFields.COLLECTION_ID: record.collection_id,
            AttendeeFields.SELFIE_REF: record.selfie_ref,
            AttendeeFields.MATCHED_IMAGES: list(record.matched_images),
            AttendeeFields.MATCHED_VIDEOS: list(record.matched_videos),
            AttendeeFields.DISPLAY_NAME: record.display_name,
            AttendeeFields.COVER_REF: record.cover_ref,
            AttendeeFields.HAS_CONTRIBUTED: record.has_contributed,
        }
        if record.created_at is not None:
            record_dict[AttendeeFields.CREATED_AT] = record.created_at
        return record_dict
