"""Constants for variant collection bindings"""
from variant_dbenv.domain.models.clustered_variant import ClusteredVariant
from variant_dbenv.domain.models.document_kind import DocumentKind
from variant_dbenv.domain.models.submitted_variant import SubmittedVariant


class VariantCollections:
    """Document kinds for each variant collection"""
    SUBMITTED_VARIANTS = DocumentKind("submittedVariantEntity", SubmittedVariant)
    DBSNP_SUBMITTED_VARIANTS = DocumentKind("dbsnpSubmittedVariantEntity", SubmittedVariant)
    CLUSTERED_VARIANTS = DocumentKind("clusteredVariantEntity", ClusteredVariant)
    DBSNP_CLUSTERED_VARIANTS = DocumentKind("dbsnpClusteredVariantEntity", ClusteredVariant)
