import os
import re
import uuid
from pathlib import Path

from storefront.core.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class LocalFileStorage:
    """
    Stores uploaded media on the local filesystem.

    Files are written under ``media_root`` with a generated name and served
    from ``media_url``.
    """

    def __init__(self, media_root: str, media_url: str = "/uploads"):
        self.media_root = Path(media_root)
        self.media_url = media_url.rstrip("/")

    @staticmethod
    def safe_name(filename: str) -> str:
        """Base name of an uploaded file with anything unusual replaced by ``_``."""
        name = os.path.basename(filename or "").strip()
        name = _UNSAFE_CHARS.sub("_", name).strip("._")
        return name or "file"

    def save(self, filename: str, content: bytes) -> str:
        """
        Write a file and return its public URL.

        Args:
            filename: Client-supplied file name
            content: File bytes

        Returns:
            URL path of the stored file
        """
        self.media_root.mkdir(parents=True, exist_ok=True)
        stored_name = f"{uuid.uuid4().hex}_{self.safe_name(filename)}"
        path = self.media_root / stored_name
        path.write_bytes(content)

        logger.info(f"Stored upload {stored_name}", extra={"size": len(content)})
        return f"{self.media_url}/{stored_name}"

    def delete(self, url: str) -> None:
        """Remove a file previously returned by :meth:`save`; missing files are ignored."""
        path = self.media_root / self.safe_name(url.rsplit("/", 1)[-1])
        path.unlink(missing_ok=True)
        logger.info(f"Removed upload {path.name}")
