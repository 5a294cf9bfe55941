from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    # 1️⃣ Database
    DATABASE_URL: str = "sqlite:///./myreview.db"
    DATABASE_ECHO: bool = False

    # 2️⃣ Attachments (review photos)
    ATTACHMENT_DIR: str = "static/review_images"

    # 3️⃣ Backup
    BACKUP_FILENAME_PREFIX: str = "myreview_backup"

    # frontend origins
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # optional, for safety

settings = Settings()
