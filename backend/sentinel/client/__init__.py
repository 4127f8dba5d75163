from sentinel.client.store_client import ProjectStoreClient

__all__ = ["ProjectStoreClient"]
