from typing import List, Optional
import uuid
import logging

from sqlalchemy.orm import Session

from linkup.modules.highlights.models.highlight import Highlight, HighlightStory
from linkup.modules.highlights.schemas.highlight import Highlight as HighlightSchema, HighlightWithStories
from linkup.modules.stories.models.story import Story
from linkup.modules.stories.schemas.story import Story as StorySchema

logger = logging.getLogger(__name__)


def get_highlight(db: Session, highlight_id: str) -> Optional[Highlight]:
    return db.query(Highlight).filter(Highlight.id == highlight_id).first()


def owns_all_stories(db: Session, owner_id: str, story_ids: List[str]) -> bool:
    """True when every id refers to an existing story of the owner"""
    found = db.query(Story.id).filter(Story.id.in_(story_ids), Story.author_id == owner_id).count()
    return found == len(set(story_ids))


def get_highlight_stories(db: Session, highlight_id: str) -> List[Story]:
    """Stories assigned to a highlight, including expired ones, in assignment order"""
    return (
        db.query(Story)
        .join(HighlightStory, HighlightStory.story_id == Story.id)
        .filter(HighlightStory.highlight_id == highlight_id)
        .order_by(HighlightStory.assigned_at.asc(), Story.created_at.asc())
        .all()
    )


def with_stories(db: Session, highlight: Highlight) -> HighlightWithStories:
    stories = [StorySchema.model_validate(story) for story in get_highlight_stories(db, highlight.id)]
    return HighlightWithStories(
        **HighlightSchema.model_validate(highlight).model_dump(),
        story_count=len(stories),
        stories=stories,
    )


def get_user_highlights(db: Session, owner_id: str) -> List[Highlight]:
    return (
        db.query(Highlight)
        .filter(Highlight.owner_id == owner_id)
        .order_by(Highlight.created_at.desc())
        .all()
    )


def _assign_stories(db: Session, highlight_id: str, story_ids: List[str]) -> None:
    for story_id in story_ids:
        db.add(HighlightStory(highlight_id=highlight_id, story_id=story_id))


def create_highlight(db: Session, owner_id: str, title: str, cover_image: str, story_ids: List[str]) -> Highlight:
    highlight = Highlight(
        id=str(uuid.uuid4()),
        owner_id=owner_id,
        title=title,
        cover_image=cover_image,
    )
    db.add(highlight)
    db.flush()
    _assign_stories(db, highlight.id, story_ids)
    db.commit()
    db.refresh(highlight)
    logger.info(f"Created highlight {highlight.id} with {len(story_ids)} stories for user {owner_id}")
    return highlight


def update_highlight(
    db: Session,
    highlight: Highlight,
    title: Optional[str] = None,
    story_ids: Optional[List[str]] = None,
    cover_image: Optional[str] = None,
) -> Highlight:
    """Partial update. A new list of story ids replaces the previous assignment."""
    if title is not None:
        highlight.title = title
    if cover_image is not None:
        highlight.cover_image = cover_image
    if story_ids is not None:
        db.query(HighlightStory).filter(HighlightStory.highlight_id == highlight.id).delete(
            synchronize_session=False
        )
        _assign_stories(db, highlight.id, story_ids)

    db.commit()
    db.refresh(highlight)
    return highlight


def delete_highlight(db: Session, highlight: Highlight) -> None:
    db.query(HighlightStory).filter(HighlightStory.highlight_id == highlight.id).delete(synchronize_session=False)
    db.delete(highlight)
    db.commit()
