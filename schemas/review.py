from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

SCORE_MIN = 1.0
SCORE_MAX = 5.0


def check_score(value: Optional[float]) -> Optional[float]:
    if value is None:
        return value
    if not SCORE_MIN <= value <= SCORE_MAX or not (value * 2).is_integer():
        raise ValueError(f"Score must be between {SCORE_MIN} and {SCORE_MAX} in steps of 0.5")
    return value


class ReviewCreate(BaseModel):
    name: str
    favorite: bool = False
    category_id: int
    genre: Optional[str] = None
    review: str = ""
    item_score1: float
    item_score2: Optional[float] = None
    item_score3: Optional[float] = None
    item_score4: Optional[float] = None
    item_score5: Optional[float] = None

    @field_validator("item_score1", "item_score2", "item_score3", "item_score4", "item_score5")
    @classmethod
    def scores_in_range(cls, value: Optional[float]) -> Optional[float]:
        return check_score(value)

    @field_validator("genre")
    @classmethod
    def blank_genre_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

class ReviewUpdate(ReviewCreate):
    pass

class ReviewRead(BaseModel):
    id: int
    name: str
    favorite: bool
    image: Optional[str]
    category_id: int
    genre: Optional[str]
    review: str
    item_score1: float
    item_score2: Optional[float]
    item_score3: Optional[float]
    item_score4: Optional[float]
    item_score5: Optional[float]
    created_date: datetime
    average_score: float

    class Config:
        from_attributes = True
