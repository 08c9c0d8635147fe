"""Error tracking data models."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class ErrorRecord(BaseModel):
    """Error record for a source unit that failed to render."""

    source: str
    error_type: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
