from datetime import datetime

from sqlalchemy import Column, String, DateTime, Text, ForeignKey, UniqueConstraint

from linkup.db.session import Base

REPORT_REASONS = ("SPAM", "HARASSMENT", "INAPPROPRIATE", "OTHER")

REPORT_PENDING = "PENDING"
REPORT_RESOLVED = "RESOLVED"
REPORT_DISMISSED = "DISMISSED"


class Post(Base):
    __tablename__ = "posts"

    id = Column(String, primary_key=True, index=True)
    content = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    video_url = Column(String, nullable=True)
    author_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships are queried explicitly in the services of each module


class SavedPost(Base):
    __tablename__ = "saved_posts"

    id = Column(String, primary_key=True, index=True)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (UniqueConstraint("post_id", "user_id", name="unique_saved_post"),)


class PostReport(Base):
    __tablename__ = "post_reports"

    id = Column(String, primary_key=True, index=True)
    post_id = Column(String, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    reporter_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    reason = Column(String, nullable=False)  # SPAM, HARASSMENT, INAPPROPRIATE, OTHER
    status = Column(String, default=REPORT_PENDING, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (UniqueConstraint("post_id", "reporter_id", name="unique_post_report"),)
