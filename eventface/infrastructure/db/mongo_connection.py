# Standard library imports
from typing import Optional

# External package imports
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase, AsyncIOMotorCollection

# Local application imports
from ...core.config import get_settings


# Global MongoDB connection instances (singleton pattern)
_mongo_client: Optional[AsyncIOMotorClient] = None
_mongo_database: Optional[AsyncIOMotorDatabase] = None

ATTENDEE_COLLECTION = "attendee_records"
IDENTIFIER_MAP_COLLECTION = "identifier_map"


def get_database() -> AsyncIOMotorDatabase:
    """
    Get MongoDB database instance (singleton pattern)
    
    Returns:
        MongoDB database instance
    """
    global _mongo_client, _mongo_database
    
    if _mongo_database is not None:
        return _mongo_database
    
    settings = get_settings()
    _mongo_client = AsyncIOMotorClient(settings.mongo_uri)
    _mongo_database = _mongo_client[settings.mongo_database_name]
    return _mongo_database


def close_database() -> None:
    """Close the MongoDB client, if one was opened"""
    global _mongo_client, _mongo_database
    if _mongo_client is not None:
        _mongo_client.close()
    _mongo_client = None
    _mongo_database = None


def get_attendee_collection() -> AsyncIOMotorCollection:
    """
    Get attendee records collection from MongoDB
    
    Returns:
        MongoDB collection for attendee records
    """
    return get_database()[ATTENDEE_COLLECTION]


def get_identifier_map_collection() -> AsyncIOMotorCollection:
    """
    Get identifier side-index collection from MongoDB
    
    Returns:
        MongoDB collection mapping external identifiers to asset keys
    """
    return get_database()[IDENTIFIER_MAP_COLLECTION]
