# Standard library imports
from typing import Optional

# Local application imports
from .base_container import BaseContainer
from .providers import (
    DatabaseProvider,
    GatewayProvider,
    MatchProvider,
    MediaProvider,
    RepositoryProvider,
    ServiceProvider,
)


class DIContainer(BaseContainer):
    """
    Main dependency injection container.
    Composes all providers in the correct order.
    
    Registration order is important:
    1. External clients (GatewayProvider) - object storage, face index, frame extractor
    2. Database connections (DatabaseProvider)
    3. Repositories (RepositoryProvider) - depends on database
    4. Core services (ServiceProvider) - depend on clients and repositories
    5. Use cases (MediaProvider, MatchProvider) - depend on services
    """
    
    def __init__(self) -> None:
        super().__init__()
        self.setup()
    
    def setup(self) -> None:
        """
        Setup dependency registrations by composing all providers.
        Order matters: clients → database → repositories → services → use cases
        """
        GatewayProvider.register(self)
        DatabaseProvider.register(self)
        RepositoryProvider.register(self)
        ServiceProvider.register(self)
        MediaProvider.register(self)
        MatchProvider.register(self)


# Global container instance (singleton pattern)
_container: Optional[DIContainer] = None


def get_container() -> DIContainer:
    """
    Get the global DI container instance (singleton pattern)
    
    Returns:
        DIContainer instance with all dependencies registered
    """
    global _container
    if _container is None:
        _container = DIContainer()
    return _container


def reset_container() -> None:
    """Drop the global container (next get_container() builds a new one)"""
    global _container
    _container = None
