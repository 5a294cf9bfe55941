from fastapi import APIRouter, Depends, HTTPException

from api.deps import get_category_store, get_review_store
from models.category import Category
from schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from services.category_store import CategoryStore
from services.file_service import AttachmentStore, get_attachment_store
from services.review_store import ReviewStore

router = APIRouter()


def to_read(category: Category, reviews: ReviewStore) -> CategoryRead:
    data = CategoryRead.model_validate(category)
    data.review_count = reviews.count_by_category(category.id)
    return data


@router.post("/category/create", response_model=CategoryRead)
def create_category(
    payload: CategoryCreate,
    categories: CategoryStore = Depends(get_category_store),
    reviews: ReviewStore = Depends(get_review_store),
):
    category = Category(name=payload.name, icon=payload.icon, **payload.item_slots())
    category = categories.insert(category)
    return to_read(category, reviews)

@router.get("/category/list", response_model=list[CategoryRead])
def list_categories(
    categories: CategoryStore = Depends(get_category_store),
    reviews: ReviewStore = Depends(get_review_store),
):
    return [to_read(category, reviews) for category in categories.list_all()]

@router.get("/category/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: int,
    categories: CategoryStore = Depends(get_category_store),
    reviews: ReviewStore = Depends(get_review_store),
):
    category = categories.get_by_id(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")
    return to_read(category, reviews)

@router.put("/category/update/{category_id}", response_model=CategoryRead)
def update_category(
    category_id: int,
    payload: CategoryUpdate,
    categories: CategoryStore = Depends(get_category_store),
    reviews: ReviewStore = Depends(get_review_store),
):
    category = categories.get_by_id(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    category.name = payload.name
    category.icon = payload.icon
    for slot, label in payload.item_slots().items():
        setattr(category, slot, label)
    category = categories.update(category)
    return to_read(category, reviews)

@router.delete("/category/delete/{category_id}")
def delete_category(
    category_id: int,
    categories: CategoryStore = Depends(get_category_store),
    reviews: ReviewStore = Depends(get_review_store),
    attachments: AttachmentStore = Depends(get_attachment_store),
):
    category = categories.get_by_id(category_id)
    if not category:
        raise HTTPException(status_code=404, detail="Category not found")

    # The reviews are removed by the cascade, their photos are not
    images = [review.image for review in reviews.list_by_category(category_id) if review.image]
    categories.delete(category)
    for image in images:
        attachments.delete(image)
    return {"message": "Category deleted successfully"}
