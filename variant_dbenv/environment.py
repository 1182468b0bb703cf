"""
Database Environment
====================

An isolated bundle of MongoDB client, document template and (optionally)
accessioning services, built from one properties file.

Environments are plain values: several of them (e.g. production and
staging) can be held side by side in one process, each with its own
connection and configuration.

Construction paths:
- parse_from(): client + template only, for data-access callers
- create_from_container(): also resolves the accessioning services through
  an EnvironmentContainer bound to the same connection
- from_properties(): like parse_from() for properties already in memory
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence, TypeVar, Union

from pymongo import MongoClient

from variant_dbenv.application.services.clustered_variant_accessioning_service import ClusteredVariantAccessioningService
from variant_dbenv.application.services.submitted_variant_accessioning_service import SubmittedVariantAccessioningService
from variant_dbenv.core.config import Settings
from variant_dbenv.core.properties import ConnectionParameters, read_properties
from variant_dbenv.di.base_container import BaseContainer
from variant_dbenv.di.container import EnvironmentContainer
from variant_dbenv.domain.models.document_kind import DocumentKind
from variant_dbenv.infrastructure.db.bulk_upsert import BulkUpsertOperation
from variant_dbenv.infrastructure.db.document_template import DocumentTemplate, build_document_template
from variant_dbenv.infrastructure.db.mongo_connection import build_mongo_client

logger = logging.getLogger(__name__)

T = TypeVar("T")

ContainerFactory = Callable[[ConnectionParameters, Optional[Settings]], BaseContainer]


@dataclass(frozen=True)
class DatabaseEnvironment:
    """
    Database environment handle.

    Owns its client exclusively: close() (or leaving a ``with`` block)
    closes the connection and ends the environment.
    """
    name: str
    client: MongoClient
    template: DocumentTemplate
    submitted_variants: Optional[SubmittedVariantAccessioningService] = None
    clustered_variants: Optional[ClusteredVariantAccessioningService] = None
    container: Optional[BaseContainer] = None

    @property
    def has_services(self) -> bool:
        return self.submitted_variants is not None and self.clustered_variants is not None

    def bulk_upsert(self, candidates: Sequence[T], kind: DocumentKind[T]) -> None:
        """
        Insert the candidates whose id is not already in the kind's collection.

        Existing documents are left untouched. Duplicate ids within the batch
        collapse to the last occurrence.

        Raises:
            WriteConflictError: If a concurrent writer inserted one of the ids first
        """
        BulkUpsertOperation(self.template).execute(candidates, kind)

    def close(self) -> None:
        """Close the underlying connection."""
        logger.info(f"Closing database environment '{self.name}'")
        self.client.close()

    def __enter__(self) -> "DatabaseEnvironment":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    @classmethod
    def from_properties(
        cls,
        properties: Mapping[str, Optional[str]],
        name: str = "default",
        settings: Optional[Settings] = None,
    ) -> "DatabaseEnvironment":
        """
        Build a data-access environment from properties already in memory.

        Raises:
            ConfigurationError: If a required property is missing or invalid
            ConnectivityError: If the server is unreachable or authentication fails
        """
        params = ConnectionParameters.from_properties(properties)
        client = build_mongo_client(params, settings)
        try:
            template = build_document_template(client, params.database, settings)
        except Exception:
            client.close()
            raise
        logger.info(f"Database environment '{name}' ready (database: {params.database})")
        return cls(name=name, client=client, template=template)

    @classmethod
    def parse_from(
        cls,
        properties_file: Union[str, Path],
        name: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> "DatabaseEnvironment":
        """
        Build a data-access environment from a properties file.

        Args:
            properties_file: Path to the properties file
            name: Environment name (defaults to the file name without extension)
            settings: Process settings (defaults to get_settings())

        Returns:
            DatabaseEnvironment without accessioning services

        Raises:
            ConfigurationError: If the file cannot be read or a property is missing or invalid
            ConnectivityError: If the server is unreachable or authentication fails
        """
        properties = read_properties(properties_file)
        return cls.from_properties(properties, name=name or Path(properties_file).stem, settings=settings)

    @classmethod
    def create_from_container(
        cls,
        properties_file: Union[str, Path],
        container_class: ContainerFactory = EnvironmentContainer,
        name: Optional[str] = None,
        settings: Optional[Settings] = None,
    ) -> "DatabaseEnvironment":
        """
        Build a full environment, with accessioning services, through a DI container.

        Args:
            properties_file: Path to the properties file
            container_class: Container factory called with (params, settings)
            name: Environment name (defaults to the file name without extension)
            settings: Process settings (defaults to get_settings())

        Returns:
            DatabaseEnvironment with services and the container that built them

        Raises:
            ConfigurationError: If the file cannot be read or a property is missing or invalid
            ConnectivityError: If the server is unreachable or authentication fails
        """
        params = ConnectionParameters.from_properties(read_properties(properties_file))
        container = container_class(params, settings)
        client = container.get(MongoClient)
        try:
            env = cls(
                name=name or Path(properties_file).stem,
                client=client,
                template=container.get(DocumentTemplate),
                submitted_variants=container.get(SubmittedVariantAccessioningService),
                clustered_variants=container.get(ClusteredVariantAccessioningService),
                container=container,
            )
        except Exception:
            client.close()
            raise

        logger.info(f"Database environment '{env.name}' ready with services (database: {params.database})")
        return env
