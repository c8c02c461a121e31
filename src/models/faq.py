from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, Text
from src.db.interfaces.postgresql import Base


class Faq(Base):
    __tablename__ = "faq_records"

    # One row per FAQ and language; translations share the id
    id = Column(Integer, primary_key=True, autoincrement=False)
    lang = Column(String(5), primary_key=True)
    solution_id = Column(Integer, unique=True, nullable=False, index=True)

    title = Column(Text, nullable=False)
    content = Column(Text, nullable=True)  # HTML
    keywords = Column(String(512), nullable=True)
    category_id = Column(Integer, nullable=True)
    active = Column(String(3), nullable=False, default="yes")  # 'yes' / 'no'

    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
