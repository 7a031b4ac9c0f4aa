from .gateway_provider import GatewayProvider
from .database_provider import DatabaseProvider
from .repository_provider import RepositoryProvider
from .service_provider import ServiceProvider
from .media_provider import MediaProvider
from .match_provider import MatchProvider


__all__ = [
    "GatewayProvider",
    "DatabaseProvider",
    "RepositoryProvider",
    "ServiceProvider",
    "MediaProvider",
    "MatchProvider",
]
