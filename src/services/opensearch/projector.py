from typing import Any, Mapping, Union

from pydantic import TypeAdapter
from src.schemas.faq import FaqRecord, NormalizedDocument
from src.services.text.normalizer import TextNormalizer

RecordLike = Union[FaqRecord, Mapping[str, Any]]

# same 'yes' / 'no' coercion FaqRecord applies to its active field
_ACTIVE_FLAG = TypeAdapter(bool)


def as_record(record: RecordLike) -> FaqRecord:
    if isinstance(record, FaqRecord):
        return record
    return FaqRecord.model_validate(record)


def is_active(record: RecordLike) -> bool:
    """Read only the active flag, so inactive rows never go through full validation."""
    if isinstance(record, FaqRecord):
        return record.active
    return _ACTIVE_FLAG.validate_python(record.get("active", True))


class DocumentProjector:
    """Maps FAQ records onto the document shape stored in the index. No I/O."""

    def __init__(self, normalizer: TextNormalizer):
        self.normalizer = normalizer

    def project(self, record: RecordLike) -> NormalizedDocument:
        # title -> question and content -> answer are resolved by FaqRecord's aliases
        faq = as_record(record)
        return NormalizedDocument(
            key=faq.solution_id,
            id=faq.id,
            lang=faq.lang,
            question=faq.question,
            answer=self.normalizer.strip_tags(faq.answer),
            keywords=faq.keywords,
            category_id=faq.category_id,
        )
