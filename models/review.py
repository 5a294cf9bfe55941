# backend/models/review.py
from typing import Optional, List
from datetime import datetime
from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel, Relationship

from .category import utc_now

__all__ = ["Review"]


class Review(SQLModel, table=True):
    __tablename__ = "reviews"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    favorite: bool = Field(default=False)
    # Attachment handle (absolute file path) of the review photo
    image: Optional[str] = None
    category_id: int = Field(foreign_key="categories.id", ondelete="CASCADE", index=True)
    genre: Optional[str] = None
    review: str = ""
    item_score1: float
    item_score2: Optional[float] = None
    item_score3: Optional[float] = None
    item_score4: Optional[float] = None
    item_score5: Optional[float] = None
    created_date: datetime = Field(default_factory=utc_now, index=True, sa_type=DateTime)

    category: Optional["Category"] = Relationship(back_populates="reviews")

    @property
    def scores(self) -> List[Optional[float]]:
        return [self.item_score1, self.item_score2, self.item_score3, self.item_score4, self.item_score5]

    @property
    def average_score(self) -> float:
        """Mean of the scores that are present; absent scores do not count as zero."""
        present = [score for score in self.scores if score is not None]
        if not present:
            return 0.0
        return sum(present) / len(present)
