"""
Shared test fixtures.

Provides: properties files, settings, an in-memory MongoDB double
(collection / database / client) and a document template bound to it.
No MongoDB server is needed.
"""
import copy
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock, patch

import pytest
from pymongo.errors import BulkWriteError

from variant_dbenv.core.config import Settings
from variant_dbenv.infrastructure.db.document_template import DocumentTemplate, build_document_template

DUPLICATE_KEY_ERROR = 11000

PROPERTIES = {
    "spring.data.mongodb.database": "eva_accession_sharded",
    "spring.data.mongodb.host": "mongo.example.org",
    "spring.data.mongodb.port": "27017",
    "spring.data.mongodb.username": "eva_user",
    "spring.data.mongodb.password": "s3cr3t-Pa$$",
    "spring.data.mongodb.authentication-database": "admin",
    "mongodb.read-preference": "secondaryPreferred",
}


class FakeCollection:
    """In-memory stand-in for a pymongo Collection (the calls used by the template only)."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: Dict[Any, Dict[str, Any]] = {}
        self.find_calls: List[Dict[str, Any]] = []
        self.insert_calls: List[List[Dict[str, Any]]] = []

    def seed(self, *documents: Dict[str, Any]) -> None:
        for doc in documents:
            self.documents[doc["_id"]] = copy.deepcopy(doc)

    def find(self, filter: Dict[str, Any], projection: Optional[Dict[str, Any]] = None):
        self.find_calls.append(filter)
        ids = filter["_id"]["$in"]
        found = [self.documents[i] for i in ids if i in self.documents]
        if projection:
            return [{key: doc[key] for key in projection if key in doc} for doc in found]
        return [copy.deepcopy(doc) for doc in found]

    def find_one(self, filter: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        doc = self.documents.get(filter["_id"])
        return copy.deepcopy(doc) if doc else None

    def insert_many(self, documents, ordered: bool = True):
        documents = list(documents)
        self.insert_calls.append(copy.deepcopy(documents))
        write_errors = []
        inserted = []
        for index, doc in enumerate(documents):
            if doc["_id"] in self.documents:
                write_errors.append({
                    "index": index,
                    "code": DUPLICATE_KEY_ERROR,
                    "errmsg": f"E11000 duplicate key error collection: {self.name}",
                    "keyValue": {"_id": doc["_id"]},
                })
                if ordered:
                    break
                continue
            self.documents[doc["_id"]] = copy.deepcopy(doc)
            inserted.append(doc["_id"])
        if write_errors:
            raise BulkWriteError({
                "writeErrors": write_errors,
                "writeConcernErrors": [],
                "nInserted": len(inserted),
                "nUpserted": 0,
                "nMatched": 0,
                "nModified": 0,
                "nRemoved": 0,
                "upserted": [],
            })
        return SimpleNamespace(inserted_ids=inserted)


class FakeDatabase:
    def __init__(self, name: str = "test") -> None:
        self.name = name
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name: str) -> FakeCollection:
        return self.collections.setdefault(name, FakeCollection(name))


@pytest.fixture
def properties() -> Dict[str, str]:
    """Valid raw properties (fresh copy per test)."""
    return dict(PROPERTIES)


@pytest.fixture
def properties_file(tmp_path, properties):
    """Write properties to <tmp>/prod.properties and return the path."""

    def _write(values: Dict[str, str] = None, name: str = "prod.properties"):
        path = tmp_path / name
        lines = ["# Test environment"]
        lines += [f"{key}={value}" for key, value in (values if values is not None else properties).items()]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings with deterministic values, independent of the developer's environment."""
    monkeypatch.setenv("TIMEZONE", "UTC")
    monkeypatch.setenv("MONGO_SERVER_SELECTION_TIMEOUT_MS", "1500")
    monkeypatch.setenv("MAP_KEY_DOT_REPLACEMENT", "#")
    return Settings()


@pytest.fixture
def fake_database() -> FakeDatabase:
    return FakeDatabase("eva_accession_sharded")


@pytest.fixture
def fake_client(fake_database):
    """MagicMock client whose get_database() returns the in-memory database."""
    client = MagicMock(name="MongoClient()")
    client.get_database.return_value = fake_database
    return client


@pytest.fixture
def template(fake_client, settings) -> DocumentTemplate:
    return build_document_template(fake_client, "eva_accession_sharded", settings)


@pytest.fixture
def mongo_client_class(fake_client):
    """Patch the MongoClient class used by the connection builder."""
    with patch("variant_dbenv.infrastructure.db.mongo_connection.MongoClient", return_value=fake_client) as cls:
        yield cls
