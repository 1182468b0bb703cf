"""
Variant Repository Interface
============================

Abstract interface for variant data access.
Implementations should be in the infrastructure layer.
"""
from abc import ABC, abstractmethod
from typing import Generic, Iterable, Sequence, Set, TypeVar

T = TypeVar("T")


class VariantRepository(ABC, Generic[T]):
    """
    Abstract repository for one variant collection.

    Writes are insert-if-absent: existing documents are never overwritten.
    """

    @abstractmethod
    def exists(self, variant_id: str) -> bool:
        """
        Check if a variant exists.

        Args:
            variant_id: Hashed variant identifier

        Returns:
            True if a document with this id is stored, False otherwise
        """
        pass

    @abstractmethod
    def find_existing_ids(self, variant_ids: Iterable[str]) -> Set[str]:
        """
        Find which of the given ids are already stored.

        Args:
            variant_ids: Hashed variant identifiers

        Returns:
            Subset of ``variant_ids`` present in the collection
        """
        pass

    @abstractmethod
    def save_all(self, variants: Sequence[T]) -> None:
        """
        Insert the variants whose id is not stored yet.

        Args:
            variants: Variants with their ``id`` already set
        """
        pass
