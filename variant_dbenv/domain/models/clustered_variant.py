"""
Clustered Variant Model
=======================

Domain model for a clustered variant (RS): the locus-level record that
submitted variants are clustered under.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class ClusteredVariant:
    """Clustered variant (RS) record. ``id`` is the hash of assembly, contig, start and type."""
    assembly_accession: str = field(metadata={"field": "asm"})
    taxonomy_accession: int = field(metadata={"field": "tax"})
    contig: str
    start: int
    type: str
    id: Optional[str] = None
    accession: Optional[int] = None
    validated: Optional[bool] = None
    map_weight: Optional[int] = field(default=None, metadata={"field": "mapWeight"})
    version: int = 1
    created_date: Optional[datetime] = field(default=None, metadata={"field": "createdDate"})

    def summary(self) -> str:
        """Defining fields joined into the string that is hashed into ``id``."""
        return "_".join([self.assembly_accession, self.contig, str(self.start), self.type])
