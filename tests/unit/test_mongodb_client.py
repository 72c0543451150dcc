from unittest.mock import MagicMock, patch

import pytest
from pymongo.errors import PyMongoError, ServerSelectionTimeoutError

from storefront.core.exceptions import DatabaseError
from storefront.infrastructure.database.mongodb.client import MongoDBClient


def test_collection_comes_from_configured_database():
    pymongo_client = MagicMock()
    client = MongoDBClient("mongodb://example", "storefront", client=pymongo_client)

    client.get_collection("products")

    pymongo_client.__getitem__.assert_called_with("storefront")
    pymongo_client.__getitem__.return_value.__getitem__.assert_called_with("products")


def test_health_check_reports_unavailable():
    pymongo_client = MagicMock()
    pymongo_client.admin.command.side_effect = PyMongoError("down")
    client = MongoDBClient("mongodb://example", "storefront", client=pymongo_client)

    assert client.health_check()["status"] == "unavailable"


def test_health_check_ok():
    client = MongoDBClient("mongodb://example", "storefront", client=MagicMock())
    assert client.health_check()["status"] == "ok"


def test_connection_failure_raises_database_error():
    with patch("storefront.infrastructure.database.mongodb.client.MongoClient") as mongo_client:
        mongo_client.return_value.admin.command.side_effect = ServerSelectionTimeoutError("no servers")
        client = MongoDBClient("mongodb://example", "storefront", connect_retries=2)

        with pytest.raises(DatabaseError):
            client.get_connection()

        assert mongo_client.call_count == 2
        assert mongo_client.return_value.close.call_count == 2


def test_indexes_created_once_across_repositories():
    from storefront.api.dependencies import get_category_repository

    pymongo_client = MagicMock()
    collection = pymongo_client.__getitem__.return_value.__getitem__.return_value
    collection.find_one.return_value = None
    client = MongoDBClient("mongodb://example", "storefront", client=pymongo_client)

    for _ in range(3):
        get_category_repository(client).get_by_slug("x")

    assert collection.create_index.call_count == 2  # slug and name, once each


def test_failed_index_creation_is_retried():
    pymongo_client = MagicMock()
    collection = pymongo_client.__getitem__.return_value.__getitem__.return_value
    collection.create_index.side_effect = [PyMongoError("not primary"), "slug_unique"]
    client = MongoDBClient("mongodb://example", "storefront", client=pymongo_client)
    indexes = [{"key": {"slug": 1}, "name": "slug_unique", "unique": True}]

    assert client.ensure_indexes("categories", indexes) is False
    assert client.ensure_indexes("categories", indexes) is True
    assert client.ensure_indexes("categories", indexes) is True
    assert collection.create_index.call_count == 2
