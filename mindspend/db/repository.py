from functools import lru_cache

from mindspend.core.config import settings
from mindspend.db.base import Repository


@lru_cache()
def get_repository() -> Repository:
    """FastAPI dependency returning the configured repository singleton."""
    if settings.STORAGE_BACKEND == "memory":
        from mindspend.db.memory import MemoryRepository

        return MemoryRepository()

    from mindspend.db.dynamo import DynamoRepository

    return DynamoRepository()
