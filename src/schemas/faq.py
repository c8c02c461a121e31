from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from src.exceptions import PartialBatchFailure


class FaqRecord(BaseModel):
    """A FAQ record as handed over by the record source.

    Single-document callers pass ``question``/``answer``; rows coming from the
    FAQ listing use ``title``/``content``. Both shapes validate into the same
    fields.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int
    solution_id: int = Field(validation_alias=AliasChoices("solution_id", "solutionId"))
    lang: str
    question: str = Field(default="", validation_alias=AliasChoices("question", "title"))
    answer: str = Field(default="", validation_alias=AliasChoices("answer", "content"))
    keywords: str = ""
    category_id: Optional[int] = Field(default=None, validation_alias=AliasChoices("category_id", "categoryId"))
    active: bool = True  # accepts 'yes' / 'no'

    @field_validator("question", "answer", "keywords", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value


class NormalizedDocument(BaseModel):
    """The document shape stored in the search index, keyed by solution id."""

    model_config = ConfigDict(frozen=True)

    key: int
    id: int
    lang: str
    question: str
    answer: str
    keywords: str
    category_id: Optional[int] = None

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"key"})


class SyncResult(BaseModel):
    success: bool
    response: Optional[Dict[str, Any]] = None
    error_detail: Optional[str] = None


class MappingStatus(str, Enum):
    CREATED = "created"
    ALREADY_PRESENT = "already_present"
    FAILED = "failed"


class BatchFailure(BaseModel):
    batch_number: int
    size: int
    error_detail: str
    failed_keys: List[str] = Field(default_factory=list)


class BulkSyncResult(BaseModel):
    """Aggregated outcome of a multi-batch bulk synchronization."""

    total_batches: int = 0
    succeeded_batches: int = 0
    indexed: int = 0
    skipped: int = 0
    first_failure: Optional[BatchFailure] = None
    last_response: Optional[Dict[str, Any]] = None
    cancelled: bool = False

    @property
    def failed_batches(self) -> int:
        return self.total_batches - self.succeeded_batches

    @property
    def success(self) -> bool:
        return self.failed_batches == 0 and not self.cancelled

    def raise_for_failure(self) -> None:
        """Raise PartialBatchFailure describing the first failed batch, if any."""
        if self.first_failure is None:
            return
        failure = self.first_failure
        raise PartialBatchFailure(
            f"{self.failed_batches} of {self.total_batches} bulk batches failed; "
            f"first was batch {failure.batch_number}: {failure.error_detail}",
            failed_keys=failure.failed_keys,
            info=self.last_response,
        )
