# Standard library imports
from typing import Optional

# Third-party imports
from pymongo import MongoClient

# Local application imports
from ..core.config import Settings, get_settings
from ..core.properties import ConnectionParameters
from .base_container import BaseContainer
from .providers import (
    AccessioningProvider,
    DatabaseProvider,
    RepositoryProvider,
)


class EnvironmentContainer(BaseContainer):
    """
    Dependency injection container for one database environment.

    Each environment gets its own container; nothing is shared between
    instances, so production and staging containers can live side by side.

    Registration order is important:
    1. Configuration (connection parameters, settings)
    2. Database connection and template (DatabaseProvider)
    3. Repositories (RepositoryProvider) - depend on the template
    4. Services (AccessioningProvider) - depend on repositories
    """

    def __init__(self, params: ConnectionParameters, settings: Optional[Settings] = None) -> None:
        super().__init__()
        self.register_singleton(ConnectionParameters, params)
        self.register_singleton(Settings, settings or get_settings())
        try:
            self.setup()
        except Exception:
            # The client connects eagerly; a failed setup must not leak it
            if self.has(MongoClient):
                self.get(MongoClient).close()
            raise

    def setup(self) -> None:
        """
        Setup dependency registrations by composing all providers.
        Order matters: database → repositories → services
        """
        DatabaseProvider.register(self)
        RepositoryProvider.register(self)
        AccessioningProvider.register(self)
