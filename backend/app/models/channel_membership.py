from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class ChannelMembership(Base):
    """Join table between User and Channel.

    A parted PM keeps its row with ``hidden`` set so the pair can be re-opened
    without losing history; parting a public channel deletes the row.
    """

    __tablename__ = "chat_channel_memberships"

    id = Column(Integer, primary_key=True, index=True)
    channel_id = Column(Integer, ForeignKey("chat_channels.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    hidden = Column(Boolean, default=False, nullable=False)
    # Highest message id the user has marked as read. NULL means never read.
    last_read_id = Column(Integer, nullable=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    channel = relationship("Channel", back_populates="memberships")
    user = relationship("User", back_populates="channel_memberships")

    __table_args__ = (UniqueConstraint("channel_id", "user_id", name="unique_channel_member"),)
