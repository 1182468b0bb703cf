"""
Bulk Upsert
===========

Insert-if-absent for a batch of documents.

Steps:
1. Group candidates by id; duplicates in the batch collapse, last one wins.
   A candidate without an id fails the whole batch before anything is sent
2. One existence query for all candidate ids
3. Drop candidates whose id is already stored
4. Insert the rest in one batch

Existing documents are never overwritten. There is no lock between the
existence check and the insert, so a concurrent writer can still win the
race; that surfaces as WriteConflictError and is not retried here.
"""
import logging
from typing import Any, Dict, Sequence, TypeVar

from pymongo.errors import BulkWriteError

from variant_dbenv.core.exceptions import WriteConflictError
from variant_dbenv.domain.models.document_kind import DocumentKind
from variant_dbenv.infrastructure.db.document_template import DocumentTemplate

logger = logging.getLogger(__name__)

T = TypeVar("T")

DUPLICATE_KEY_ERROR = 11000


class BulkUpsertOperation:
    """Insert-if-absent bulk operation over a document template."""

    def __init__(self, template: DocumentTemplate) -> None:
        self._template = template

    def execute(self, candidates: Sequence[T], kind: DocumentKind[T]) -> None:
        """
        Insert the candidates whose id is not stored yet.

        Args:
            candidates: Documents to merge into the collection
            kind: Target collection binding

        Raises:
            ValueError: If a candidate has no id
            WriteConflictError: If a concurrent writer inserted one of the ids first
        """
        if not candidates:
            return

        grouped: Dict[Any, T] = {}
        for index, candidate in enumerate(candidates):
            doc_id = self._template.mapper.get_id(candidate)
            if doc_id is None:
                raise ValueError(f"Candidate {index} for '{kind}' has no id: {candidate!r}")
            grouped[doc_id] = candidate

        collapsed = len(candidates) - len(grouped)
        if collapsed:
            logger.debug(f"Collapsed {collapsed} duplicate ids in batch for '{kind}'")

        existing = self._template.find_existing_ids(kind, grouped.keys())
        to_insert = [doc for doc_id, doc in grouped.items() if doc_id not in existing]

        if not to_insert:
            logger.debug(f"All {len(grouped)} documents already exist in '{kind}'")
            return

        try:
            self._template.insert_all(kind, to_insert)
        except BulkWriteError as err:
            write_errors = err.details.get("writeErrors", [])
            if not write_errors or any(e.get("code") != DUPLICATE_KEY_ERROR for e in write_errors):
                raise
            conflicting = [to_insert[e["index"]] for e in write_errors]
            raise WriteConflictError(
                kind.collection_name,
                [self._template.mapper.get_id(doc) for doc in conflicting],
                inserted_count=err.details.get("nInserted", 0),
            ) from err

        logger.info(
            f"Inserted {len(to_insert)} documents into '{kind}' "
            f"({len(existing)} already present)"
        )
