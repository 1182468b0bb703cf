"""
Submitted Variant Model
=======================

Domain model for a variant as submitted by a study. This is a pure domain
object with no infrastructure dependencies.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional


@dataclass
class SubmittedVariant:
    """
    Submitted variant (SS) record.

    ``id`` is the hash of the variant's defining fields, so two submissions
    of the same variant in the same study map to the same document.
    Stored keys follow the short names used by the accessioning pipelines.
    """
    reference_sequence_accession: str = field(metadata={"field": "seq"})
    taxonomy_accession: int = field(metadata={"field": "tax"})
    project_accession: str = field(metadata={"field": "study"})
    contig: str
    start: int
    reference_allele: str = field(metadata={"field": "ref"})
    alternate_allele: str = field(metadata={"field": "alt"})
    id: Optional[str] = None
    accession: Optional[int] = None
    clustered_variant_accession: Optional[int] = field(default=None, metadata={"field": "rs"})
    supported_by_evidence: Optional[bool] = field(default=None, metadata={"field": "evidence"})
    assembly_match: Optional[bool] = field(default=None, metadata={"field": "asmMatch"})
    allele_match: Optional[bool] = field(default=None, metadata={"field": "allelesMatch"})
    validated: Optional[bool] = None
    remapped_from: Optional[str] = field(default=None, metadata={"field": "remappedFrom"})
    remapped_date: Optional[datetime] = field(default=None, metadata={"field": "remappedDate"})
    # Free-form remapping attributes; keys may contain dots (e.g. "source.assembly")
    remapping_attributes: Dict[str, str] = field(default_factory=dict, metadata={"field": "remappingAttributes"})
    version: int = 1
    created_date: Optional[datetime] = field(default=None, metadata={"field": "createdDate"})

    def summary(self) -> str:
        """Defining fields joined into the string that is hashed into ``id``."""
        return "_".join([
            self.reference_sequence_accession,
            str(self.taxonomy_accession),
            self.project_accession,
            self.contig,
            str(self.start),
            self.reference_allele,
            self.alternate_allele,
        ])
