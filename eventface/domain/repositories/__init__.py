from .attendee_repository import AttendeeRepository
from .identifier_map_repository import IdentifierMapRepository

__all__ = ["AttendeeRepository", "IdentifierMapRepository"]
