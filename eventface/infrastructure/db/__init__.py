from .mongo_connection import (
    close_database,
    get_attendee_collection,
    get_database,
    get_identifier_map_collection,
)
from .mongo_attendee_repository import MongoAttendeeRepository
from .mongo_identifier_map_repository import MongoIdentifierMapRepository

__all__ = [
    "close_database",
    "get_attendee_collection",
    "get_database",
    "get_identifier_map_collection",
    "MongoAttendeeRepository",
    "MongoIdentifierMapRepository",
]
