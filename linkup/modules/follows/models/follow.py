from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint

from linkup.db.session import Base

PENDING = "PENDING"
ACCEPTED = "ACCEPTED"
REJECTED = "REJECTED"


class FollowRequest(Base):
    __tablename__ = "follow_requests"

    id = Column(String, primary_key=True, index=True)
    follower_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    followee_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    status = Column(String, default=PENDING, nullable=False)  # PENDING, ACCEPTED, REJECTED
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("follower_id", "followee_id", name="unique_follow"),
        CheckConstraint("follower_id != followee_id", name="no_self_follow"),
    )
