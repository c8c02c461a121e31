from abc import ABC, abstractmethod
from typing import Any, ContextManager, List, Optional

from sqlalchemy.orm import Session


class BaseDatabase(ABC):
    @abstractmethod
    def startup(self) -> None:
        pass

    @abstractmethod
    def teardown(self) -> None:
        pass

    @abstractmethod
    def get_session(self) -> ContextManager[Session]:
        pass


class BaseRepository(ABC):
    """Read side of a record store."""

    def __init__(self, session: Session):
        self.session = session

    @abstractmethod
    def get_by_id(self, record_id: Any) -> Optional[Any]:
        """Get a record by ID."""

    @abstractmethod
    def list(self, limit: int = 100, offset: int = 0) -> List[Any]:
        """List records with pagination."""
