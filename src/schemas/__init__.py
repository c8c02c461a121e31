from .faq import BatchFailure, BulkSyncResult, FaqRecord, MappingStatus, NormalizedDocument, SyncResult

__all__ = [
    "BatchFailure",
    "BulkSyncResult",
    "FaqRecord",
    "MappingStatus",
    "NormalizedDocument",
    "SyncResult",
]
