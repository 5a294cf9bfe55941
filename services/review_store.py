import logging
from typing import List, Optional

from sqlmodel import Session, select, func

from database import storage_operation
from models.category import Category
from models.review import Review

logger = logging.getLogger(__name__)


class ScoreMismatch(ValueError):
    pass


def check_scores_match_category(category: Category, scores: List[Optional[float]]) -> None:
    """A score slot must be filled exactly when the category defines that item."""
    for index, (item, score) in enumerate(zip(category.item_slots, scores), start=1):
        if item is not None and score is None:
            raise ScoreMismatch(f"Score for '{item}' (itemScore{index}) is required")
        if item is None and score is not None:
            raise ScoreMismatch(f"Category '{category.name}' has no item{index}, itemScore{index} must be empty")


class ReviewStore:
    """Read/write access to reviews, newest first by default."""

    def __init__(self, session: Session):
        self.session = session

    def _ordered(self, statement, newest_first: bool = True):
        if newest_first:
            return statement.order_by(Review.created_date.desc(), Review.id.desc())
        return statement.order_by(Review.created_date.asc(), Review.id.asc())

    @storage_operation
    def list_all(self, newest_first: bool = True) -> List[Review]:
        return list(self.session.exec(self._ordered(select(Review), newest_first)).all())

    @storage_operation
    def list_favorites(self) -> List[Review]:
        statement = self._ordered(select(Review).where(Review.favorite == True))  # noqa: E712
        return list(self.session.exec(statement).all())

    @storage_operation
    def list_by_category(self, category_id: int, newest_first: bool = True) -> List[Review]:
        statement = self._ordered(select(Review).where(Review.category_id == category_id), newest_first)
        return list(self.session.exec(statement).all())

    @storage_operation
    def search(self, query: str, category_id: Optional[int] = None) -> List[Review]:
        statement = select(Review).where(Review.name.ilike(f"%{query}%"))
        if category_id is not None:
            statement = statement.where(Review.category_id == category_id)
        return list(self.session.exec(self._ordered(statement)).all())

    def sorted_by_rating(self, ascending: bool = False) -> List[Review]:
        return sorted(self.list_all(), key=lambda review: review.average_score, reverse=not ascending)

    @storage_operation
    def count_by_category(self, category_id: int) -> int:
        statement = select(func.count(Review.id)).where(Review.category_id == category_id)
        return self.session.exec(statement).one()

    @storage_operation
    def get_by_id(self, review_id: int) -> Optional[Review]:
        return self.session.get(Review, review_id)

    @storage_operation
    def insert(self, review: Review) -> Review:
        if not review.id:
            review.id = None
            self.session.add(review)
        else:
            review = self.session.merge(review)
        self.session.commit()
        self.session.refresh(review)
        return review

    @storage_operation
    def update(self, review: Review) -> Optional[Review]:
        existing = self.session.get(Review, review.id) if review.id else None
        if existing is None:
            logger.info(f"Review {review.id} not found, update skipped")
            return None
        # An edit never resets the creation date
        if existing is not review:
            review.created_date = existing.created_date
        review = self.session.merge(review)
        self.session.commit()
        self.session.refresh(review)
        return review

    @storage_operation
    def delete(self, review: Review) -> None:
        self.session.delete(review)
        self.session.commit()

    @storage_operation
    def delete_all(self) -> int:
        reviews = self.session.exec(select(Review)).all()
        for review in reviews:
            self.session.delete(review)
        self.session.commit()
        return len(reviews)
