from enum import Enum as PyEnum
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File, Query

from api.deps import get_category_store, get_review_store
from models.review import Review
from schemas.review import ReviewCreate, ReviewRead, ReviewUpdate
from services.category_store import CategoryStore
from services.file_service import AttachmentStore, get_attachment_store, safe_filename
from services.review_store import ReviewStore, ScoreMismatch, check_scores_match_category

router = APIRouter()


class SortOrder(str, PyEnum):
    NEWEST_FIRST = "newest"
    OLDEST_FIRST = "oldest"
    HIGHEST_RATED = "highest"
    LOWEST_RATED = "lowest"


def checked_scores(payload: ReviewCreate, categories: CategoryStore):
    category = categories.get_by_id(payload.category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    scores = [payload.item_score1, payload.item_score2, payload.item_score3, payload.item_score4, payload.item_score5]
    try:
        check_scores_match_category(category, scores)
    except ScoreMismatch as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/review/create", response_model=ReviewRead)
def create_review(
    payload: ReviewCreate,
    categories: CategoryStore = Depends(get_category_store),
    reviews: ReviewStore = Depends(get_review_store),
):
    checked_scores(payload, categories)
    return reviews.insert(Review(**payload.model_dump()))

@router.get("/review/list", response_model=list[ReviewRead])
def list_reviews(
    category_id: Optional[int] = Query(None),
    favorites_only: bool = Query(False),
    sort: SortOrder = Query(SortOrder.NEWEST_FIRST),
    reviews: ReviewStore = Depends(get_review_store),
):
    if sort == SortOrder.HIGHEST_RATED or sort == SortOrder.LOWEST_RATED:
        items = reviews.sorted_by_rating(ascending=sort == SortOrder.LOWEST_RATED)
    else:
        items = reviews.list_all(newest_first=sort == SortOrder.NEWEST_FIRST)

    return [
        review for review in items
        if (category_id is None or review.category_id == category_id)
        and (not favorites_only or review.favorite)
    ]

@router.get("/review/search", response_model=list[ReviewRead])
def search_reviews(
    q: str = Query(..., min_length=1),
    category_id: Optional[int] = Query(None),
    reviews: ReviewStore = Depends(get_review_store),
):
    return reviews.search(q, category_id=category_id)

@router.get("/review/{review_id}", response_model=ReviewRead)
def get_review(review_id: int, reviews: ReviewStore = Depends(get_review_store)):
    review = reviews.get_by_id(review_id)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    return review

@router.put("/review/update/{review_id}", response_model=ReviewRead)
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    categories: CategoryStore = Depends(get_category_store),
    reviews: ReviewStore = Depends(get_review_store),
):
    review = reviews.get_by_id(review_id)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")
    checked_scores(payload, categories)

    for field, value in payload.model_dump().items():
        setattr(review, field, value)
    return reviews.update(review)

@router.post("/review/{review_id}/image", response_model=ReviewRead)
def upload_review_image(
    review_id: int,
    file: UploadFile = File(...),
    reviews: ReviewStore = Depends(get_review_store),
    attachments: AttachmentStore = Depends(get_attachment_store),
):
    review = reviews.get_by_id(review_id)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    old_image = review.image
    review.image = attachments.save_upload(file.file, safe_filename(review.id, file.filename or "photo.jpg"))
    review = reviews.update(review)
    if old_image and old_image != review.image:
        attachments.delete(old_image)
    return review

@router.delete("/review/delete/{review_id}")
def delete_review(
    review_id: int,
    reviews: ReviewStore = Depends(get_review_store),
    attachments: AttachmentStore = Depends(get_attachment_store),
):
    review = reviews.get_by_id(review_id)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    image = review.image
    reviews.delete(review)
    attachments.delete(image)
    return {"message": "Review deleted successfully"}
