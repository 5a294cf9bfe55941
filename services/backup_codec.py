"""Conversion between the stored categories/reviews and the backup document.

The document is a single JSON object with a ``categories`` and a ``reviews``
array. Review photos travel inline as base64 text so the backup stays one
self-contained file.
"""
import base64
import logging
from typing import Sequence

from pydantic import ValidationError

from core.exceptions import AttachmentUnreadable, MalformedDocument
from models.category import Category
from models.review import Review
from schemas.backup import BackupDocument, CategoryBackup, ReviewBackup
from services.file_service import AttachmentStore

logger = logging.getLogger(__name__)


def category_to_backup(category: Category) -> CategoryBackup:
    return CategoryBackup.model_validate(category, from_attributes=True)


def review_to_backup(review: Review, attachments: AttachmentStore) -> ReviewBackup:
    record = ReviewBackup.model_validate(review, from_attributes=True)
    if review.image:
        try:
            data = attachments.read(review.image)
        except AttachmentUnreadable as e:
            # The review is still exported, just without its photo
            logger.warning(f"Skipping photo of review {review.id}: {e}")
        else:
            record.image_base64 = base64.b64encode(data).decode("ascii")
    return record


def encode(categories: Sequence[Category], reviews: Sequence[Review], attachments: AttachmentStore) -> str:
    document = BackupDocument.model_construct(
        categories=[category_to_backup(category) for category in categories],
        reviews=[review_to_backup(review, attachments) for review in reviews],
    )
    return document.model_dump_json(by_alias=True)


def decode(text: str) -> BackupDocument:
    try:
        return BackupDocument.model_validate_json(text)
    except ValidationError as e:
        raise MalformedDocument(f"Backup document is invalid: {e.error_count()} error(s): {e}") from e


def backup_to_category(record: CategoryBackup) -> Category:
    return Category(**record.model_dump())


def backup_to_review(record: ReviewBackup) -> Review:
    return Review(**record.model_dump(exclude={"image_base64"}))
