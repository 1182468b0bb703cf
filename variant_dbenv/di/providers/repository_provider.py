from typing import TYPE_CHECKING

from ...domain.constants.collections import VariantCollections
from ...infrastructure.db.document_template import DocumentTemplate
from ...infrastructure.db.mongo_variant_repository import MongoVariantRepository

if TYPE_CHECKING:
    from ..base_container import BaseContainer

SUBMITTED_VARIANT_REPOSITORY = "submitted_variant_repository"
CLUSTERED_VARIANT_REPOSITORY = "clustered_variant_repository"


class RepositoryProvider:
    """Repository registration provider - binds variant collections to the environment's template"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register one repository per variant collection.
        Both share the template registered by DatabaseProvider.
        """
        template = container.get(DocumentTemplate)

        container.register_singleton(
            SUBMITTED_VARIANT_REPOSITORY,
            MongoVariantRepository(template, VariantCollections.SUBMITTED_VARIANTS),
        )

        container.register_singleton(
            CLUSTERED_VARIANT_REPOSITORY,
            MongoVariantRepository(template, VariantCollections.CLUSTERED_VARIANTS),
        )
