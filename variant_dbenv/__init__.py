"""
variant_dbenv
=============

Isolated MongoDB environments for the variant accessioning databases.

    with DatabaseEnvironment.parse_from("prod.properties") as prod:
        prod.bulk_upsert(variants, VariantCollections.SUBMITTED_VARIANTS)
"""
from variant_dbenv.core.exceptions import (
    ConfigurationError,
    ConnectivityError,
    DatabaseEnvironmentError,
    MappingError,
    WriteConflictError,
)
from variant_dbenv.domain.constants.collections import VariantCollections
from variant_dbenv.domain.models.document_kind import DocumentKind
from variant_dbenv.environment import DatabaseEnvironment

__all__ = [
    "DatabaseEnvironment",
    "DocumentKind",
    "VariantCollections",
    "DatabaseEnvironmentError",
    "ConfigurationError",
    "ConnectivityError",
    "WriteConflictError",
    "MappingError",
]
