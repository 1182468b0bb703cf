"""
Document Kind
=============

Explicit binding between a stored collection and the domain class its
documents map to. Call sites name the kind instead of relying on the runtime
type of the documents.
"""
from dataclasses import dataclass
from typing import Generic, Type, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class DocumentKind(Generic[T]):
    """A collection name plus the class its documents are read into."""
    collection_name: str
    document_class: Type[T]

    def __str__(self) -> str:
        return self.collection_name
