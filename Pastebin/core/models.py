from __future__ import annotations

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from .encoding import StoredContent


class PasteRecord(BaseModel):
    key: str
    content: str
    metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def stored(self) -> StoredContent:
        return StoredContent.parse(self.content)

    @property
    def creator_ip(self) -> Optional[str]:
        ip = self.metadata.get("ip")
        return ip if isinstance(ip, str) and ip else None

    def metadata_json(self) -> str:
        return json.dumps(self.metadata)

    @staticmethod
    def load_metadata(raw: Optional[str]) -> Dict[str, Any]:
        # Unreadable metadata behaves like metadata without an owner.
        try:
            data = json.loads(raw or "{}")
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
