from storefront.infrastructure.database.mongodb.client import MongoDBClient

__all__ = ["MongoDBClient"]
