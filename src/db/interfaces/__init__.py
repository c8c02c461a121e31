from .base import BaseDatabase, BaseRepository
from .postgresql import PostgreSQLDatabase, PostgreSQLSettings

__all__ = ["BaseDatabase", "BaseRepository", "PostgreSQLDatabase", "PostgreSQLSettings"]