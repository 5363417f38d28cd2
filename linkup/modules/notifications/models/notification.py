from datetime import datetime

from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Text

from linkup.db.session import Base

WELCOME = "WELCOME"
FOLLOW = "FOLLOW"
FOLLOW_REQUEST = "FOLLOW_REQUEST"
FOLLOW_ACCEPTED = "FOLLOW_ACCEPTED"
LIKE = "LIKE"
COMMENT = "COMMENT"
STORY_LIKE = "STORY_LIKE"
ADMIN_WARNING = "ADMIN_WARNING"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    actor_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=True)  # The user who triggered the notification
    type = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    related_id = Column(String, nullable=True)  # ID of the related post, story or follow request
    is_read = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
