# backend/core/exceptions.py


class MyReviewError(Exception):
    """Base class for errors raised by the review stores and the backup core."""
    kind = "unexpected"


class StorageFailure(MyReviewError):
    """Raised when the database rejects a read or write."""
    kind = "storage_failure"


class AttachmentUnreadable(MyReviewError):
    """Raised when a review photo cannot be read from disk."""
    kind = "attachment_unreadable"


class BackupError(MyReviewError):
    """Raised when a backup or restore cannot continue."""
    pass


class SourceUnreadable(BackupError):
    kind = "source_unreadable"


class MalformedDocument(BackupError):
    kind = "malformed_document"


class SinkWriteFailure(BackupError):
    kind = "sink_write_failure"
