"""
Document Template
=================

A MongoDB database handle bound to a finalized document mapper.

All reads and writes of domain objects go through here, so every collection
of an environment shares the same mapping rules and codec options.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, TypeVar

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.database import Database

from variant_dbenv.core.config import Settings, get_settings
from variant_dbenv.core.exceptions import ConfigurationError
from variant_dbenv.domain.models.document_kind import DocumentKind
from variant_dbenv.infrastructure.db.converters import default_converters
from variant_dbenv.infrastructure.db.document_mapper import MONGO_ID_FIELD, DocumentMapper, build_document_mapper
from variant_dbenv.utils.datetime_utils import get_timezone

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DocumentTemplate:
    """
    Typed access to the collections of one database.

    Args:
        database: MongoDB database handle
        mapper: Finalized document mapper
    """

    def __init__(self, database: Database, mapper: DocumentMapper) -> None:
        if not mapper.is_finalized:
            raise RuntimeError("DocumentTemplate requires a finalized DocumentMapper")
        self._database = database
        self._mapper = mapper

    @property
    def database(self) -> Database:
        return self._database

    @property
    def mapper(self) -> DocumentMapper:
        return self._mapper

    def collection(self, kind: DocumentKind) -> Collection:
        """Get the MongoDB collection of a document kind."""
        return self._database[kind.collection_name]

    def find_existing_ids(self, kind: DocumentKind, ids: Iterable[Any]) -> Set[Any]:
        """
        Return the subset of ``ids`` already stored in the kind's collection.

        Issues a single ``$in`` query that projects only ``_id``.
        """
        id_list = list(ids)
        if not id_list:
            return set()
        cursor = self.collection(kind).find({MONGO_ID_FIELD: {"$in": id_list}}, {MONGO_ID_FIELD: 1})
        return {doc[MONGO_ID_FIELD] for doc in cursor}

    def find_by_id(self, kind: DocumentKind[T], document_id: Any) -> Optional[T]:
        """Find one document by id and map it to the kind's class."""
        doc = self.collection(kind).find_one({MONGO_ID_FIELD: document_id})
        if not doc:
            return None
        return self._mapper.from_document(doc, kind.document_class)

    def insert_all(self, kind: DocumentKind[T], objects: Sequence[T]) -> List[Any]:
        """
        Insert objects in one unordered batch.

        Returns:
            Ids of the inserted documents

        Raises:
            pymongo.errors.BulkWriteError: If any document is rejected
        """
        documents: List[Dict[str, Any]] = [self._mapper.to_document(obj) for obj in objects]
        result = self.collection(kind).insert_many(documents, ordered=False)
        return list(result.inserted_ids)


def build_document_template(
    client: MongoClient,
    database_name: str,
    settings: Optional[Settings] = None,
) -> DocumentTemplate:
    """
    Build the document template for a database.

    Args:
        client: Connected MongoDB client
        database_name: Database holding the environment's collections
        settings: Process settings (defaults to get_settings())

    Returns:
        DocumentTemplate with a finalized mapper

    Raises:
        ConfigurationError: If the settings give an invalid dot replacement
    """
    settings = settings or get_settings()
    try:
        mapper = build_document_mapper(
            default_converters(get_timezone(settings.timezone)),
            map_key_dot_replacement=settings.map_key_dot_replacement,
        )
    except ValueError as err:
        raise ConfigurationError(str(err), key="MAP_KEY_DOT_REPLACEMENT") from err
    database = client.get_database(database_name, codec_options=mapper.codec_options)
    logger.debug(f"Document template ready for database '{database_name}'")
    return DocumentTemplate(database, mapper)
