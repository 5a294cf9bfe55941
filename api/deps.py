from fastapi import Depends
from sqlmodel import Session

from database import get_session
from services.backup_service import BackupService
from services.category_store import CategoryStore
from services.file_service import AttachmentStore, get_attachment_store
from services.review_store import ReviewStore


def get_category_store(session: Session = Depends(get_session)) -> CategoryStore:
    return CategoryStore(session)


def get_review_store(session: Session = Depends(get_session)) -> ReviewStore:
    return ReviewStore(session)


def get_backup_service(
    categories: CategoryStore = Depends(get_category_store),
    reviews: ReviewStore = Depends(get_review_store),
    attachments: AttachmentStore = Depends(get_attachment_store),
) -> BackupService:
    # Both stores share the request's session
    return BackupService(categories, reviews, attachments)
