from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(20), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)

    # Always settings.SERVER_DOMAIN for local users; part of the token subject.
    home_server = Column(String(255), nullable=False, server_default="local")

    is_active = Column(Boolean, default=True)
    # Site-level flags — set by operators, never via the public API.
    # is_site_admin: access to /api/operator/ endpoints and channel creation.
    # is_restricted: moderation sanction; the user's content is hidden from
    # everyone else and they cannot open or write to conversations.
    is_site_admin = Column(Boolean, default=False, nullable=False)
    is_restricted = Column(Boolean, default=False, nullable=False)
    # Only users this account has friended may open a PM with it.
    pm_friends_only = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    messages = relationship("Message", back_populates="user")
    channel_memberships = relationship(
        "ChannelMembership",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    account_histories = relationship(
        "UserAccountHistory",
        back_populates="user",
        foreign_keys="UserAccountHistory.user_id",
        cascade="all, delete-orphan",
        order_by="UserAccountHistory.id",
    )

    @property
    def qualified_name(self) -> str:
        """Returns username@home_server — the globally unique identity."""
        return f"{self.username}@{self.home_server}"

    @property
    def is_silenced(self) -> bool:
        """True while any silence in the account history has not expired."""
        now = datetime.now(timezone.utc)
        return any(h.is_active_silence(now) for h in self.account_histories)
