from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel


class UploadedFile(BaseModel):
    """A file stored under the media root."""

    id: Optional[str] = None
    name: str
    url: str
    mime: Optional[str] = None
    size: int = 0
    created_at: Optional[datetime] = None

    def to_response(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "mime": self.mime,
            "size": self.size,
        }
