"""
MongoDB Connection
==================

Builds MongoDB clients for an environment.

Every client built here carries the same durability policy: majority write
concern, majority read concern and the configured read preference. Callers
cannot override it.
"""
import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.errors import ConfigurationError as DriverConfigurationError
from pymongo.errors import ConnectionFailure, OperationFailure
from pymongo.read_concern import ReadConcern
from pymongo.write_concern import WriteConcern

from variant_dbenv.core.config import Settings, get_settings
from variant_dbenv.core.exceptions import ConfigurationError, ConnectivityError
from variant_dbenv.core.properties import ConnectionParameters

logger = logging.getLogger(__name__)

# Durability policy applied to every environment
WRITE_CONCERN = WriteConcern(w="majority")
READ_CONCERN = ReadConcern("majority")


def build_mongo_client(params: ConnectionParameters, settings: Optional[Settings] = None) -> MongoClient:
    """
    Create a connected MongoDB client.

    The connection is eager: the server is pinged before returning, so a bad
    host or bad credentials fail here rather than on first use.

    Args:
        params: Validated connection parameters
        settings: Process settings (defaults to get_settings())

    Returns:
        Connected MongoClient

    Raises:
        ConfigurationError: If the driver rejects the options
        ConnectivityError: If the server is unreachable or authentication fails
    """
    settings = settings or get_settings()

    logger.info(
        f"Connecting to MongoDB {params.host}:{params.port}/{params.database} "
        f"as '{params.username}' (authSource={params.authentication_database}, "
        f"readPreference={params.read_preference})"
    )

    try:
        client = MongoClient(
            host=params.host,
            port=params.port,
            username=params.username,
            password=params.password.get_secret_value(),
            authSource=params.authentication_database,
            readPreference=params.read_preference,
            w=WRITE_CONCERN.document["w"],
            readConcernLevel=READ_CONCERN.level,
            serverSelectionTimeoutMS=settings.server_selection_timeout_ms,
        )
    except DriverConfigurationError as err:
        raise ConfigurationError(f"MongoDB rejected connection options: {err}") from err

    try:
        client.admin.command("ping")
    except (ConnectionFailure, OperationFailure) as err:
        client.close()
        raise ConnectivityError(f"Cannot connect to MongoDB: {err}", host=params.host, port=params.port) from err

    logger.info(f"Connected to MongoDB: {params.database}")
    return client
