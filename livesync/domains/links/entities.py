import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


@dataclass
class Link:
    id: str
    title: str
    url: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_document(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "url": self.url,
            "createdAt": self.created_at,
        }

    @classmethod
    def create_link(cls, title: str, url: str, created_at: Optional[datetime] = None) -> "Link":
        link = cls(id=str(uuid.uuid4()), title=title, url=url)
        if created_at is not None:
            link.created_at = created_at
        return link
