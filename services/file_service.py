import logging
import os
import re
import shutil
import time
from typing import BinaryIO, Optional

from core.config import settings
from core.exceptions import AttachmentUnreadable

logger = logging.getLogger(__name__)


def safe_filename(review_id: int, original_filename: str) -> str:
    # Remove unwanted characters and spaces, replace with underscores
    name, ext = os.path.splitext(original_filename)
    name = re.sub(r'[^a-zA-Z0-9_-]', '_', name)
    # Append review ID and timestamp for uniqueness
    timestamp = int(time.time())
    filename = f"{review_id}_{name}_{timestamp}{ext.lower()}"
    return filename


def restore_filename(review_id: int) -> str:
    """Name of the photo written back for a review during restore."""
    return f"review_image_{review_id}.jpg"


class AttachmentStore:
    """Review photos on the local filesystem; a handle is the file's absolute path."""

    def __init__(self, base_dir: Optional[str] = None):
        self.base_dir = os.path.abspath(base_dir or settings.ATTACHMENT_DIR)

    def owns(self, handle: str) -> bool:
        """True when the handle points inside this store's directory."""
        root = os.path.realpath(self.base_dir)
        target = os.path.realpath(handle)
        try:
            return os.path.commonpath([root, target]) == root
        except ValueError:
            return False

    def read(self, handle: str) -> bytes:
        if not self.owns(handle):
            raise AttachmentUnreadable(f"{handle} is not a stored attachment")
        try:
            with open(handle, "rb") as f:
                return f.read()
        except OSError as e:
            raise AttachmentUnreadable(f"Cannot read attachment {handle}: {e}") from e

    def write(self, data: bytes, filename: str) -> str:
        os.makedirs(self.base_dir, exist_ok=True)
        dest_path = os.path.join(self.base_dir, filename)
        with open(dest_path, "wb") as f:
            f.write(data)
        return dest_path

    def save_upload(self, upload_file: BinaryIO, filename: str) -> str:
        """Stream an uploaded file to disk and return its handle."""
        os.makedirs(self.base_dir, exist_ok=True)
        dest_path = os.path.join(self.base_dir, filename)

        # Use shutil.copyfileobj for streamed saving
        with open(dest_path, "wb") as buffer:
            shutil.copyfileobj(upload_file, buffer)

        return dest_path

    def delete(self, handle: Optional[str]) -> None:
        if not handle:
            return
        if not self.owns(handle):
            logger.warning(f"Not deleting {handle}: outside {self.base_dir}")
            return
        try:
            os.remove(handle)
        except FileNotFoundError:
            logger.warning(f"Attachment {handle} already gone")


def get_attachment_store() -> AttachmentStore:
    return AttachmentStore()
