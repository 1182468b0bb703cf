"""
Submitted Variant Accessioning Service
======================================

Application service for submitted variant (SS) records.
Assigns hashed identifiers and stores variants insert-if-absent.
"""
import dataclasses
import logging
from typing import Sequence, Set

from variant_dbenv.domain.models.submitted_variant import SubmittedVariant
from variant_dbenv.domain.repositories.variant_repository import VariantRepository
from variant_dbenv.utils.hashing import sha1_upper_hex

logger = logging.getLogger(__name__)


class SubmittedVariantAccessioningService:
    """
    Application service for submitted variant operations.

    Identifiers are derived from the variant's defining fields, so saving the
    same submission twice never creates a second document.
    """

    def __init__(self, repository: VariantRepository[SubmittedVariant]):
        """
        Initialize service with repository.

        Args:
            repository: Repository for submitted variant persistence
        """
        self._repository = repository

    @staticmethod
    def hash_variant(variant: SubmittedVariant) -> str:
        """Hashed identifier of a submitted variant."""
        return sha1_upper_hex(variant.summary())

    def with_hashed_id(self, variant: SubmittedVariant) -> SubmittedVariant:
        """Copy of the variant with ``id`` set to its hash."""
        return dataclasses.replace(variant, id=self.hash_variant(variant))

    def exists(self, variant: SubmittedVariant) -> bool:
        """
        Check if the variant is already stored.

        Args:
            variant: Submitted variant (``id`` need not be set)

        Returns:
            True if a variant with the same hash exists
        """
        return self._repository.exists(self.hash_variant(variant))

    def find_existing(self, variants: Sequence[SubmittedVariant]) -> Set[str]:
        """Hashes of the given variants that are already stored."""
        return self._repository.find_existing_ids([self.hash_variant(v) for v in variants])

    def save(self, variants: Sequence[SubmittedVariant]) -> None:
        """
        Store variants that are not stored yet.

        Args:
            variants: Submitted variants; their ids are (re)computed from their fields

        Raises:
            WriteConflictError: If a concurrent writer stored one of them first
        """
        hashed = [self.with_hashed_id(v) for v in variants]
        logger.debug(f"Saving {len(hashed)} submitted variants")
        self._repository.save_all(hashed)
