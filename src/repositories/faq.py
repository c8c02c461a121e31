from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import select
from src.db.interfaces.base import BaseRepository
from src.exceptions import FaqNotFound
from src.models.faq import Faq


class FaqRepository(BaseRepository):
    """Read-only access to FAQ rows in the shapes the search index consumes."""

    def get_by_id(self, record_id: Any) -> Optional[Faq]:
        """Get a FAQ by solution id."""
        stmt = select(Faq).where(Faq.solution_id == record_id)
        return self.session.scalars(stmt).first()

    def list(self, limit: int = 100, offset: int = 0) -> List[Faq]:
        stmt = select(Faq).order_by(Faq.id, Faq.lang).limit(limit).offset(offset)
        return list(self.session.scalars(stmt))

    def iter_records(self, lang: Optional[str] = None, chunk_size: int = 500) -> Iterator[Dict[str, Any]]:
        """Stream every FAQ, inactive ones included, as listing rows ordered by id."""
        stmt = select(Faq).order_by(Faq.id, Faq.lang).execution_options(yield_per=chunk_size)
        if lang:
            stmt = stmt.where(Faq.lang == lang)
        for faq in self.session.scalars(stmt):
            yield self.to_listing_row(faq)

    def get_record(self, solution_id: int) -> Dict[str, Any]:
        """Single FAQ in the question/answer shape used for one-off index updates."""
        faq = self.get_by_id(solution_id)
        if faq is None:
            raise FaqNotFound(f"FAQ with solution id {solution_id} not found")
        return {
            "id": faq.id,
            "solution_id": faq.solution_id,
            "lang": faq.lang,
            "question": faq.title,
            "answer": faq.content,
            "keywords": faq.keywords,
            "category_id": faq.category_id,
            "active": faq.active,
        }

    @staticmethod
    def to_listing_row(faq: Faq) -> Dict[str, Any]:
        return {
            "id": faq.id,
            "solution_id": faq.solution_id,
            "lang": faq.lang,
            "title": faq.title,
            "content": faq.content,
            "keywords": faq.keywords,
            "category_id": faq.category_id,
            "active": faq.active,
        }
