"""
Data models for the auto-reply service
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class MessageHeader(BaseModel):
    """Single name/value header as returned by the Gmail API"""
    name: str
    value: str


class GmailMessage(BaseModel):
    """A fetched Gmail message reduced to what the reply workflow needs"""
    id: str
    thread_id: Optional[str] = None
    label_ids: List[str] = Field(default_factory=list)
    headers: List[MessageHeader] = Field(default_factory=list)
    body: str = ""

    def get_header(self, name: str) -> Optional[str]:
        """
        Look up a header value by name.

        Header names are compared case-insensitively and the first
        occurrence wins.
        """
        wanted = name.lower()
        for header in self.headers:
            if header.name.lower() == wanted:
                return header.value
        return None

    def has_header(self, name: str) -> bool:
        return self.get_header(name) is not None


class Label(BaseModel):
    """Gmail label"""
    id: str
    name: str


class MatchResult(BaseModel):
    """Outcome of evaluating one inbox message against the keyword set"""
    message_id: str
    has_keywords: bool


class ReplyStatus(str, Enum):
    """What the reply worker did with a candidate message"""
    REPLIED = "replied"
    ALREADY_REPLIED = "already_replied"
    MISSING_HEADERS = "missing_headers"
    RELABEL_FAILED = "relabel_failed"


class ReplyOutcome(BaseModel):
    """Per-message result of the reply worker"""
    message_id: str
    status: ReplyStatus
    recipient: Optional[str] = None
    error: Optional[str] = None


class TickSummary(BaseModel):
    """Counts for a single scan-and-reply pass"""
    started_at: datetime
    finished_at: datetime
    matched: int = 0
    replied: int = 0
    skipped: int = 0
    relabel_failed: int = 0

    @classmethod
    def from_outcomes(
        cls,
        started_at: datetime,
        outcomes: List[ReplyOutcome]
    ) -> "TickSummary":
        replied = sum(
            1 for o in outcomes
            if o.status in (ReplyStatus.REPLIED, ReplyStatus.RELABEL_FAILED)
        )
        relabel_failed = sum(1 for o in outcomes if o.status == ReplyStatus.RELABEL_FAILED)
        return cls(
            started_at=started_at,
            finished_at=datetime.now(),
            matched=len(outcomes),
            replied=replied,
            skipped=len(outcomes) - replied,
            relabel_failed=relabel_failed
        )


class HealthResponse(BaseModel):
    status: str
    service: str
    scheduler_running: bool
    interval_seconds: int
    label_id: Optional[str] = None
    replied_count: int = 0
    last_tick: Optional[TickSummary] = None
