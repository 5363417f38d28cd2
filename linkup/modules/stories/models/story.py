from datetime import datetime

from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint

from linkup.db.session import Base


class Story(Base):
    __tablename__ = "stories"

    id = Column(String, primary_key=True, index=True)
    author_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    media_url = Column(String, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= datetime.utcnow()


class StoryView(Base):
    __tablename__ = "story_views"

    id = Column(String, primary_key=True, index=True)
    story_id = Column(String, ForeignKey("stories.id", ondelete="CASCADE"), nullable=False)
    viewer_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    viewed_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (UniqueConstraint("story_id", "viewer_id", name="unique_story_view"),)


class StoryLike(Base):
    __tablename__ = "story_likes"

    id = Column(String, primary_key=True, index=True)
    story_id = Column(String, ForeignKey("stories.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (UniqueConstraint("story_id", "user_id", name="unique_story_like"),)
