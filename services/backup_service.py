"""Export and restore of the whole review database.

Export reads one snapshot of each store, encodes it and writes the document to
a caller-supplied sink. Restore reads a document from a caller-supplied source,
decodes it, then replaces everything in the stores. Nothing wraps the apply
step in a transaction: a failure after the deletes leaves the stores empty or
partially filled.

Progress is one shared value per operation type. The core does not stop two
operations of the same type from running at once; callers must.
"""
import logging
import os
import threading
from dataclasses import dataclass
from enum import Enum as PyEnum
from typing import BinaryIO, Callable, List, Optional

from core.exceptions import MyReviewError, SinkWriteFailure, SourceUnreadable
from services import backup_codec
from services.category_store import CategoryStore
from services.file_service import AttachmentStore, restore_filename
from services.review_store import ReviewStore

logger = logging.getLogger(__name__)


class BackupPhase(str, PyEnum):
    IDLE = "idle"
    READING = "reading"
    TRANSFORMING = "transforming"
    WRITING = "writing"
    APPLYING = "applying"
    DONE = "done"
    FAILED = "failed"


class ProgressState:
    """Observable progress of one operation type (0.0 to 1.0 plus the phase)."""

    def __init__(self, name: str):
        self.name = name
        self.value = 0.0
        self.phase = BackupPhase.IDLE
        self._listeners: List[Callable[[float, BackupPhase], None]] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Callable[[float, BackupPhase], None]) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    def set(self, value: float, phase: BackupPhase) -> None:
        self.value = value
        self.phase = phase
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(value, phase)

    def fail(self) -> None:
        self.set(0.0, BackupPhase.FAILED)

    def reset(self) -> None:
        self.set(0.0, BackupPhase.IDLE)


backup_progress = ProgressState("backup")
restore_progress = ProgressState("restore")


@dataclass
class BackupResult:
    success: bool
    error: Optional[str] = None
    message: Optional[str] = None
    categories: int = 0
    reviews: int = 0

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def failed(cls, exc: Exception) -> "BackupResult":
        kind = exc.kind if isinstance(exc, MyReviewError) else "unexpected"
        return cls(success=False, error=kind, message=str(exc))


class BackupService:
    def __init__(
        self,
        categories: CategoryStore,
        reviews: ReviewStore,
        attachments: AttachmentStore,
        backup_state: ProgressState = backup_progress,
        restore_state: ProgressState = restore_progress,
    ):
        self.categories = categories
        self.reviews = reviews
        self.attachments = attachments
        self.backup_state = backup_state
        self.restore_state = restore_state

    def export_backup(self, sink: BinaryIO) -> BackupResult:
        """Write every category and review, photos included, to ``sink``."""
        state = self.backup_state
        try:
            state.set(0.1, BackupPhase.READING)
            categories = self.categories.list_all()
            state.set(0.3, BackupPhase.READING)
            reviews = self.reviews.list_all()
            logger.info(f"Exporting {len(categories)} categories and {len(reviews)} reviews")

            state.set(0.5, BackupPhase.TRANSFORMING)
            document = backup_codec.encode(categories, reviews, self.attachments)

            state.set(0.7, BackupPhase.WRITING)
            try:
                sink.write(document.encode("utf-8"))
                if hasattr(sink, "flush"):
                    sink.flush()
            except OSError as e:
                raise SinkWriteFailure(f"Could not write backup: {e}") from e

            state.set(1.0, BackupPhase.DONE)
            logger.info("Backup complete")
            return BackupResult(success=True, categories=len(categories), reviews=len(reviews))
        except Exception as e:
            logger.exception(f"Backup failed: {e}")
            state.fail()
            return BackupResult.failed(e)

    def restore_backup(self, source: Optional[BinaryIO]) -> BackupResult:
        """Replace all categories and reviews with the contents of ``source``."""
        state = self.restore_state
        try:
            state.set(0.1, BackupPhase.READING)
            text = self._read_source(source)

            state.set(0.3, BackupPhase.TRANSFORMING)
            document = backup_codec.decode(text)
            state.set(0.5, BackupPhase.TRANSFORMING)
            logger.info(
                f"Restoring {len(document.categories)} categories and {len(document.reviews)} reviews"
            )

            state.set(0.5, BackupPhase.APPLYING)
            replaced_images = [review.image for review in self.reviews.list_all() if review.image]
            self.categories.delete_all()
            # Usually already emptied by the category cascade
            self.reviews.delete_all()

            total = len(document.categories) + len(document.reviews)
            done = 0
            restored_images = set()
            for record in document.categories:
                self.categories.insert(backup_codec.backup_to_category(record))
                done += 1
                state.set(0.5 + 0.5 * done / total, BackupPhase.APPLYING)

            for record in document.reviews:
                review = backup_codec.backup_to_review(record)
                data = record.image_bytes()
                if data is not None:
                    review.image = self.attachments.write(data, restore_filename(record.id))
                if review.image:
                    restored_images.add(os.path.realpath(review.image))
                self.reviews.insert(review)
                done += 1
                state.set(0.5 + 0.5 * done / total, BackupPhase.APPLYING)

            self._delete_replaced_images(replaced_images, restored_images)

            state.set(1.0, BackupPhase.DONE)
            logger.info("Restore complete")
            return BackupResult(
                success=True,
                categories=len(document.categories),
                reviews=len(document.reviews),
            )
        except Exception as e:
            logger.exception(f"Restore failed: {e}")
            state.fail()
            return BackupResult.failed(e)

    def _delete_replaced_images(self, replaced_images, restored_images) -> None:
        """Remove photo files of the old reviews that the restored data no longer uses."""
        for image in replaced_images:
            if os.path.realpath(image) in restored_images or not self.attachments.owns(image):
                continue
            self.attachments.delete(image)

    def _read_source(self, source: Optional[BinaryIO]) -> str:
        if source is None:
            raise SourceUnreadable("No backup file given")
        try:
            data = source.read()
        except OSError as e:
            raise SourceUnreadable(f"Could not read backup file: {e}") from e
        if not data:
            raise SourceUnreadable("Backup file is empty")
        if isinstance(data, str):
            return data
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise SourceUnreadable(f"Backup file is not UTF-8 text: {e}") from e
