from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base

# Valid kind values
RELATION_FRIEND = "friend"
RELATION_BLOCK = "block"
VALID_RELATION_KINDS = (RELATION_FRIEND, RELATION_BLOCK)


class UserRelation(Base):
    """Directed edge user_id → zebra_id. One row per ordered pair."""

    __tablename__ = "user_relations"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    zebra_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    # kind: "friend" | "block"
    kind = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", foreign_keys=[user_id])
    zebra = relationship("User", foreign_keys=[zebra_id])

    __table_args__ = (UniqueConstraint("user_id", "zebra_id", name="unique_user_relation"),)
