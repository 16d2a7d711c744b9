from db.repositories.errors import RecordStoreUnavailableError
from db.repositories.record_repository import RecordRepository

__all__ = ["RecordRepository", "RecordStoreUnavailableError"]
