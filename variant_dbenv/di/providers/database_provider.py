from typing import TYPE_CHECKING

from pymongo import MongoClient

from ...core.config import Settings
from ...core.properties import ConnectionParameters
from ...infrastructure.db.document_template import DocumentTemplate, build_document_template
from ...infrastructure.db.mongo_connection import build_mongo_client

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class DatabaseProvider:
    """Database connection provider - single source of truth for the environment's connection"""

    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the MongoDB client and document template.
        Uses the same builders as the direct construction path, so both paths
        get the same durability policy and mapping rules.
        """
        params = container.get(ConnectionParameters)
        settings = container.get(Settings)

        mongo_client = build_mongo_client(params, settings)
        container.register_singleton(MongoClient, mongo_client)

        container.register_singleton(
            DocumentTemplate,
            build_document_template(mongo_client, params.database, settings),
        )
