from typing import Any, List, Optional, Tuple

from storefront.core.exceptions import BadRequestError, DatabaseError, RepositoryError
from storefront.core.logging import get_logger
from storefront.domain.models.upload import UploadedFile
from storefront.infrastructure.repositories.upload_repository import UploadRepository
from storefront.infrastructure.storage.local_storage import LocalFileStorage

logger = get_logger(__name__)

# (file name, content type, bytes)
IncomingFile = Tuple[str, Optional[str], bytes]

CHUNK_SIZE = 64 * 1024


async def read_upload(upload: Any, max_size: int) -> bytes:
    """
    Read an uploaded file in chunks, stopping once it passes ``max_size``.

    Raises:
        BadRequestError: If the file is larger than ``max_size``
    """
    content = bytearray()
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            return bytes(content)
        content.extend(chunk)
        if len(content) > max_size:
            raise BadRequestError(
                f"File '{upload.filename}' exceeds the maximum upload size",
                field="files",
                context={"max_size": max_size},
            )


class UploadService:
    """Stores uploaded media and records it."""

    def __init__(self, storage: LocalFileStorage, repository: UploadRepository, max_size: int):
        self.storage = storage
        self.repository = repository
        self.max_size = max_size

    def store(self, files: List[IncomingFile]) -> List[UploadedFile]:
        """
        Store every file of an upload request.

        All files are checked before any is written.

        Raises:
            BadRequestError: If no file was sent or a file is empty or too large
        """
        if not files:
            raise BadRequestError("No files uploaded", field="files")
        for name, _, content in files:
            if not content:
                raise BadRequestError(f"File '{name}' is empty", field="files")
            if len(content) > self.max_size:
                raise BadRequestError(
                    f"File '{name}' exceeds the maximum upload size",
                    field="files",
                    context={"max_size": self.max_size},
                )

        stored = []
        for name, mime, content in files:
            url = self.storage.save(name, content)
            record = UploadedFile(name=name or "file", url=url, mime=mime, size=len(content))
            try:
                stored.append(self.repository.create(record))
            except RepositoryError as e:
                self.storage.delete(url)
                raise DatabaseError(str(e))

        logger.info(f"Stored {len(stored)} uploaded files")
        return stored
