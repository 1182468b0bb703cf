from typing import TYPE_CHECKING

from ...application.services.clustered_variant_accessioning_service import ClusteredVariantAccessioningService
from ...application.services.submitted_variant_accessioning_service import SubmittedVariantAccessioningService
from .repository_provider import CLUSTERED_VARIANT_REPOSITORY, SUBMITTED_VARIANT_REPOSITORY

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class AccessioningProvider:
    """Accessioning service provider - registers variant accessioning services"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register accessioning services.
        Services are created with repositories from container.
        """
        container.register_singleton(
            SubmittedVariantAccessioningService,
            SubmittedVariantAccessioningService(
                repository=container.get(SUBMITTED_VARIANT_REPOSITORY)
            )
        )

        container.register_singleton(
            ClusteredVariantAccessioningService,
            ClusteredVariantAccessioningService(
                repository=container.get(CLUSTERED_VARIANT_REPOSITORY)
            )
        )
