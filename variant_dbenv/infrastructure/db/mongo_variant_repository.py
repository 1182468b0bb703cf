"""
MongoDB Variant Repository
==========================

Concrete implementation of VariantRepository using MongoDB.
"""
from typing import Iterable, Sequence, Set, TypeVar

from variant_dbenv.domain.models.document_kind import DocumentKind
from variant_dbenv.domain.repositories.variant_repository import VariantRepository
from variant_dbenv.infrastructure.db.bulk_upsert import BulkUpsertOperation
from variant_dbenv.infrastructure.db.document_template import DocumentTemplate

T = TypeVar("T")


class MongoVariantRepository(VariantRepository[T]):
    """
    MongoDB implementation of VariantRepository.

    Bound to one collection through its DocumentKind; writes go through
    BulkUpsertOperation so they never overwrite stored variants.
    """

    def __init__(self, template: DocumentTemplate, kind: DocumentKind[T]) -> None:
        self._template = template
        self._kind = kind
        self._bulk_upsert = BulkUpsertOperation(template)

    @property
    def kind(self) -> DocumentKind[T]:
        return self._kind

    def exists(self, variant_id: str) -> bool:
        """Check if a variant exists."""
        return bool(self._template.find_existing_ids(self._kind, [variant_id]))

    def find_existing_ids(self, variant_ids: Iterable[str]) -> Set[str]:
        """Find which of the given ids are already stored."""
        return self._template.find_existing_ids(self._kind, variant_ids)

    def save_all(self, variants: Sequence[T]) -> None:
        """Insert the variants whose id is not stored yet."""
        self._bulk_upsert.execute(variants, self._kind)
