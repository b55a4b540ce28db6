from datetime import datetime, timedelta, timezone

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base

# Valid kind values
HISTORY_NOTE = "note"
HISTORY_RESTRICTION = "restriction"
HISTORY_SILENCE = "silence"
VALID_HISTORY_KINDS = (HISTORY_NOTE, HISTORY_RESTRICTION, HISTORY_SILENCE)


class UserAccountHistory(Base):
    """Moderation log for a user. Silences expire ``period`` seconds after creation."""

    __tablename__ = "user_account_histories"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # kind: "note" | "restriction" | "silence"
    kind = Column(String(20), nullable=False, default=HISTORY_NOTE)
    reason = Column(String(500), nullable=False, default="")
    period = Column(Integer, nullable=False, default=0)
    actor_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="account_histories", foreign_keys=[user_id])
    actor = relationship("User", foreign_keys=[actor_id])

    @property
    def ends_at(self) -> datetime | None:
        if self.created_at is None:
            return None
        created = self.created_at
        # SQLite hands back naive timestamps; CURRENT_TIMESTAMP is UTC.
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)
        return created + timedelta(seconds=self.period or 0)

    def is_active_silence(self, now: datetime) -> bool:
        if self.kind != HISTORY_SILENCE:
            return False
        ends_at = self.ends_at
        return ends_at is not None and ends_at > now
