# Standard library imports
import logging
from typing import Optional

# External package imports
from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

# Local application imports
from ...domain.repositories.identifier_map_repository import IdentifierMapRepository
from ...domain.constants import IdentifierMapFields
from ...domain.exceptions import StoreFailure
from ...utils.datetime_utils import utc_now
from .mongo_connection import get_identifier_map_collection

logger = logging.getLogger(__name__)


class MongoIdentifierMapRepository(IdentifierMapRepository):
    """MongoDB implementation of IdentifierMapRepository"""
    
    def __init__(self, identifier_collection: Optional[AsyncIOMotorCollection] = None) -> None:
        self.identifier_collection = (
            identifier_collection if identifier_collection is not None else get_identifier_map_collection()
        )
    
    async def ensure_indexes(self) -> None:
        """An external identifier is unique inside its collection"""
        try:
            await self.identifier_collection.create_index(
                [(IdentifierMapFields.COLLECTION_ID, ASCENDING), (IdentifierMapFields.EXTERNAL_ID, ASCENDING)],
                unique=True,
            )
        except PyMongoError as e:
            raise StoreFailure(f"Error creating identifier indexes: {str(e)}", operation="ensure_indexes")
    
    async def claim(self, collection_id: str, external_id: str, asset_key: str) -> str:
        """Bind external_id to asset_key unless already bound, returns the owner"""
        query = {
            IdentifierMapFields.COLLECTION_ID: collection_id,
            IdentifierMapFields.EXTERNAL_ID: external_id,
        }
        try:
            try:
                document = await self.identifier_collection.find_one_and_update(
                    query,
                    {"$setOnInsert": {
                        IdentifierMapFields.ASSET_KEY: asset_key,
                        IdentifierMapFields.CREATED_AT: utc_now(),
                    }},
                    upsert=True,
                    return_document=ReturnDocument.AFTER,
                )
            except DuplicateKeyError:
                # Concurrent upsert of the same identifier: the other writer won
                document = await self.identifier_collection.find_one(query)
        except PyMongoError as e:
            raise StoreFailure(f"Error claiming identifier {external_id}: {str(e)}", operation="claim")
        
        if document is None:
            raise StoreFailure(f"Identifier {external_id} could not be claimed", operation="claim")
        return document.get(IdentifierMapFields.ASSET_KEY, "")
    
    async def resolve(self, collection_id: str, external_id: str) -> Optional[str]:
        """Return the asset key bound to external_id, or None"""
        if not external_id:
            return None
        try:
            document = await self.identifier_collection.find_one({
                IdentifierMapFields.COLLECTION_ID: collection_id,
                IdentifierMapFields.EXTERNAL_ID: external_id,
            })
        except PyMongoError as e:
            raise StoreFailure(f"Error resolving identifier {external_id}: {str(e)}", operation="resolve")
        if document is None:
            return None
        return document.get(IdentifierMapFields.ASSET_KEY)
