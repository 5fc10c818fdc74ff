import json
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlmodel import Field
from memdash.models.base import TimestampMixin


class MemoryDoc(TimestampMixin, table=True):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    # Ids are unique within one identity's collection
    user_id: str = Field(primary_key=True, index=True)

    fact: str = ""
    tags_json: str = "[]"  # JSON list of tag strings
    related_to_json: str = "[]"  # JSON list of memory ids
    pinned: bool = False
    expires_at: Optional[datetime] = Field(default=None)

    def get_tags(self) -> List[str]:
        return json.loads(self.tags_json or "[]")

    def set_tags(self, tags: List[str]):
        self.tags_json = json.dumps(list(tags))

    def get_related_to(self) -> List[str]:
        return json.loads(self.related_to_json or "[]")

    def set_related_to(self, related_to: List[str]):
        self.related_to_json = json.dumps(list(related_to))

    def to_document(self) -> Dict[str, Any]:
        """Raw snapshot document, in the camelCase shape the store pushes."""
        return {
            "id": self.id,
            "fact": self.fact,
            "tags": self.get_tags(),
            "pinned": self.pinned,
            "relatedTo": self.get_related_to(),
            "expiresAt": self.expires_at,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
