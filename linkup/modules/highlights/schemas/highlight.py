from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from linkup.core.validators import HIGHLIGHT_TITLE_MESSAGE, validate_highlight_title
from linkup.modules.stories.schemas.story import Story

MAX_HIGHLIGHT_STORIES = 20


def parse_story_ids(values: Optional[List[str]]) -> List[str]:
    """Accept repeated form fields as well as comma separated ids, keeping order"""
    story_ids: List[str] = []
    for value in values or []:
        for story_id in value.split(","):
            story_id = story_id.strip()
            if story_id and story_id not in story_ids:
                story_ids.append(story_id)
    return story_ids


class HighlightInput(BaseModel):
    title: Optional[str] = None
    story_ids: Optional[List[str]] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        if not validate_highlight_title(v):
            raise ValueError(HIGHLIGHT_TITLE_MESSAGE)
        return v.strip()

    @field_validator("story_ids")
    @classmethod
    def check_story_ids(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return v
        if not 1 <= len(v) <= MAX_HIGHLIGHT_STORIES:
            raise ValueError(f"A highlight must contain between 1 and {MAX_HIGHLIGHT_STORIES} stories")
        return v


class HighlightCreate(HighlightInput):
    title: str
    story_ids: List[str]


class HighlightUpdate(HighlightInput):
    pass


class Highlight(BaseModel):
    id: str
    owner_id: str
    title: str
    cover_image: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class HighlightWithStories(Highlight):
    story_count: int = 0
    stories: List[Story] = []
