"""
Providers Package
=================

Dependency injection providers for registering dependencies.
"""
from .database_provider import DatabaseProvider
from .repository_provider import RepositoryProvider
from .accessioning_provider import AccessioningProvider

__all__ = [
    "DatabaseProvider",
    "RepositoryProvider",
    "AccessioningProvider",
]
