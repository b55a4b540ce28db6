from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base

# Valid type values
CHANNEL_PUBLIC = "PUBLIC"
CHANNEL_PM = "PM"
VALID_CHANNEL_TYPES = (CHANNEL_PUBLIC, CHANNEL_PM)


def pm_channel_name(a: int, b: int) -> str:
    """Canonical PM channel name; the lower user id always comes first."""
    low, high = (a, b) if a < b else (b, a)
    return f"#pm_{low}-{high}"


class Channel(Base):
    __tablename__ = "chat_channels"

    id = Column(Integer, primary_key=True, index=True)
    # Unique across the deployment. PM names encode the user pair, which is
    # what makes a PM channel unique per pair.
    name = Column(String(50), unique=True, nullable=False)
    description = Column(String(500), nullable=True)
    # type: "PUBLIC" | "PM"
    type = Column(String(20), nullable=False, default=CHANNEL_PUBLIC)
    last_message_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    memberships = relationship("ChannelMembership", back_populates="channel", cascade="all, delete-orphan")
    messages = relationship("Message", back_populates="channel", cascade="all, delete-orphan")

    @property
    def is_pm(self) -> bool:
        return self.type == CHANNEL_PM

    def member_ids(self) -> list[int]:
        return sorted(m.user_id for m in self.memberships)

    def counterpart_id(self, user_id: int) -> int | None:
        """For a PM, the id of the member that is not ``user_id``."""
        others = [m.user_id for m in self.memberships if m.user_id != user_id]
        return others[0] if others else None
