from storefront.infrastructure.storage.local_storage import LocalFileStorage

__all__ = ["LocalFileStorage"]
