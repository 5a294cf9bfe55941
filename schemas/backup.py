"""Records of the backup document.

The field aliases are the member names of the JSON document, so an export
from any earlier version of the app restores unchanged.
"""
import base64
import binascii
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator, model_validator

BACKUP_DATE_FORMAT = "%Y-%m-%dT%H:%M:%SZ"


def parse_backup_date(value):
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone(timezone.utc).replace(tzinfo=None)
        return value
    if not isinstance(value, str):
        raise ValueError("createdDate must be a string")
    return datetime.strptime(value, BACKUP_DATE_FORMAT)


def format_backup_date(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.strftime(BACKUP_DATE_FORMAT)


class BackupRecord(BaseModel):
    id: int = Field(strict=True)
    name: str = Field(strict=True)
    created_date: datetime = Field(alias="createdDate")

    class Config:
        populate_by_name = True
        from_attributes = True

    @field_validator("created_date", mode="before")
    @classmethod
    def parse_created_date(cls, value):
        return parse_backup_date(value)

    @field_serializer("created_date", when_used="json")
    def serialize_created_date(self, value: datetime) -> str:
        return format_backup_date(value)


class CategoryBackup(BackupRecord):
    icon: Optional[str] = Field(default=None, strict=True)
    item1: str = Field(strict=True)
    item2: Optional[str] = Field(default=None, strict=True)
    item3: Optional[str] = Field(default=None, strict=True)
    item4: Optional[str] = Field(default=None, strict=True)
    item5: Optional[str] = Field(default=None, strict=True)

    @field_validator("item2", "item3", "item4", "item5")
    @classmethod
    def blank_item_is_none(cls, value: Optional[str]) -> Optional[str]:
        # A missing criterion is None, never a blank label
        if value is not None and not value.strip():
            return None
        return value


class ReviewBackup(BackupRecord):
    favorite: bool = Field(default=False, strict=True)
    image: Optional[str] = Field(default=None, strict=True)
    category_id: int = Field(alias="categoryId", strict=True)
    genre: Optional[str] = Field(default=None, strict=True)
    review: str = Field(strict=True)
    item_score1: float = Field(alias="itemScore1", strict=True)
    item_score2: Optional[float] = Field(default=None, alias="itemScore2", strict=True)
    item_score3: Optional[float] = Field(default=None, alias="itemScore3", strict=True)
    item_score4: Optional[float] = Field(default=None, alias="itemScore4", strict=True)
    item_score5: Optional[float] = Field(default=None, alias="itemScore5", strict=True)
    # Only ever set inside a backup document, never stored
    image_base64: Optional[str] = Field(default=None, alias="imageBase64", strict=True)

    @field_validator("image_base64")
    @classmethod
    def check_base64(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            base64.b64decode("".join(value.split()), validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("imageBase64 is not valid base64")
        return value

    def image_bytes(self) -> Optional[bytes]:
        if self.image_base64 is None:
            return None
        # Android's Base64.DEFAULT wraps lines, so whitespace is dropped first
        return base64.b64decode("".join(self.image_base64.split()))


class BackupDocument(BaseModel):
    categories: List[CategoryBackup]
    reviews: List[ReviewBackup]

    @model_validator(mode="after")
    def check_references(self):
        category_ids = [category.id for category in self.categories]
        if len(set(category_ids)) != len(category_ids):
            raise ValueError("Duplicate category id in backup")
        review_ids = [review.id for review in self.reviews]
        if len(set(review_ids)) != len(review_ids):
            raise ValueError("Duplicate review id in backup")
        known = set(category_ids)
        for review in self.reviews:
            if review.category_id not in known:
                raise ValueError(
                    f"Review {review.id} references unknown category {review.category_id}"
                )
        return self


class BackupResultRead(BaseModel):
    success: bool
    error: Optional[str] = None
    message: Optional[str] = None
    categories: int = 0
    reviews: int = 0


class ProgressRead(BaseModel):
    progress: float
    phase: str
