"""
Data Models

Pydantic models for fetched pages and scrape run summaries.
"""

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Page(BaseModel):
    """The HTTP response for a single fetch"""
    url: str = Field(..., min_length=1)
    status_code: int
    content: bytes = b''
    headers: Dict[str, str] = Field(default_factory=dict)
    encoding: Optional[str] = None

    @property
    def text(self) -> str:
        """Body decoded with the response encoding, falling back to UTF-8."""
        encoding = self.encoding or 'utf-8'
        try:
            return self.content.decode(encoding, errors='replace')
        except LookupError:
            return self.content.decode('utf-8', errors='replace')

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == 'content-type':
                return value
        return ''

    @property
    def charset(self) -> Optional[str]:
        """Charset declared in the Content-Type header, if any."""
        for part in self.content_type.split(';')[1:]:
            key, _, value = part.strip().partition('=')
            if key.lower() == 'charset':
                return value.strip('"\' ') or None
        return None


class ScrapeSummary(BaseModel):
    """Outcome of a scrape run"""
    start_url: str
    pages: int = Field(default=0, ge=0)
    rows: int = Field(default=0, ge=0)
    stopped_reason: Optional[str] = None
    errors: List[str] = Field(default_factory=list)
    visited: List[str] = Field(default_factory=list)
    started_at: datetime = Field(default_factory=datetime.now)
    finished_at: Optional[datetime] = None

    @property
    def succeeded(self) -> bool:
        return not self.errors
