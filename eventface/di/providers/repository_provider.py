from typing import TYPE_CHECKING
from ...domain.repositories.attendee_repository import AttendeeRepository
from ...domain.repositories.identifier_map_repository import IdentifierMapRepository
from ...infrastructure.db.mongo_attendee_repository import MongoAttendeeRepository
from ...infrastructure.db.mongo_identifier_map_repository import MongoIdentifierMapRepository

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class RepositoryProvider:
    """Repository registration provider - wires domain interfaces to infrastructure implementations"""
    
    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all repository implementations.
        Gets collections from database provider and creates repository instances.
        """
        container.register_singleton(
            AttendeeRepository,
            MongoAttendeeRepository(attendee_collection=container.get("attendee_collection"))
        )
        
        container.register_singleton(
            IdentifierMapRepository,
            MongoIdentifierMapRepository(identifier_collection=container.get("identifier_map_collection"))
        )
