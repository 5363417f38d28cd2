from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey

from linkup.db.session import Base


class Highlight(Base):
    __tablename__ = "highlights"

    id = Column(String, primary_key=True, index=True)
    owner_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    title = Column(String(50), nullable=False)
    cover_image = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class HighlightStory(Base):
    __tablename__ = "highlight_stories"

    highlight_id = Column(String, ForeignKey("highlights.id", ondelete="CASCADE"), primary_key=True)
    story_id = Column(String, ForeignKey("stories.id", ondelete="CASCADE"), primary_key=True)
    assigned_at = Column(DateTime, default=datetime.utcnow)
