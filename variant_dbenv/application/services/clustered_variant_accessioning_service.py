"""
Clustered Variant Accessioning Service
======================================

Application service for clustered variant (RS) records.
"""
import dataclasses
import logging
from typing import Sequence, Set

from variant_dbenv.domain.models.clustered_variant import ClusteredVariant
from variant_dbenv.domain.repositories.variant_repository import VariantRepository
from variant_dbenv.utils.hashing import sha1_upper_hex

logger = logging.getLogger(__name__)


class ClusteredVariantAccessioningService:
    """Application service for clustered variant operations."""

    def __init__(self, repository: VariantRepository[ClusteredVariant]):
        self._repository = repository

    @staticmethod
    def hash_variant(variant: ClusteredVariant) -> str:
        """Hashed identifier of a clustered variant."""
        return sha1_upper_hex(variant.summary())

    def with_hashed_id(self, variant: ClusteredVariant) -> ClusteredVariant:
        return dataclasses.replace(variant, id=self.hash_variant(variant))

    def exists(self, variant: ClusteredVariant) -> bool:
        """Check if a clustered variant with the same hash is stored."""
        return self._repository.exists(self.hash_variant(variant))

    def find_existing(self, variants: Sequence[ClusteredVariant]) -> Set[str]:
        return self._repository.find_existing_ids([self.hash_variant(v) for v in variants])

    def save(self, variants: Sequence[ClusteredVariant]) -> None:
        """Store clustered variants that are not stored yet."""
        hashed = [self.with_hashed_id(v) for v in variants]
        logger.debug(f"Saving {len(hashed)} clustered variants")
        self._repository.save_all(hashed)
