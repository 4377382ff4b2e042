import os
import logging
from typing import List, Optional
from backend.core.config import settings
from backend.core.exceptions import NotFoundError
from backend.core.storage import ensure_object_id, load_json, locked, new_object_id, save_json, utcnow
from backend.stories import schemas

logger = logging.getLogger(__name__)

STORIES_FILE = os.path.join(settings.DATA_DIR, "stories", "stories.json")


def load_stories() -> List[dict]:
    return load_json(STORIES_FILE)


def save_stories(stories: List[dict]) -> None:
    save_json(STORIES_FILE, stories)


def list_stories() -> List[dict]:
    """All stories, newest first."""
    return sorted(load_stories(), key=lambda s: (s["created_at"], s["id"]), reverse=True)


def get_story(story_id: str) -> dict:
    ensure_object_id(story_id, "Story")
    story = next((s for s in load_stories() if s["id"] == story_id), None)
    if story is None:
        raise NotFoundError("Story")
    return story


def add_story(data: schemas.StoryCreate, author_id: str, author_name: str) -> dict:
    now = utcnow().isoformat()
    story = schemas.Story(
        id=new_object_id(),
        title=data.title,
        content=data.content,
        author=author_id,
        author_name=author_name,
        tags=data.tags,
        image=data.image,
        created_at=now,
        updated_at=now,
    ).model_dump(mode="json")
    with locked(STORIES_FILE):
        stories = load_stories()
        stories.append(story)
        save_stories(stories)
    logger.info("Story %s shared by %s", story["id"], author_id)
    return story


def update_story(story_id: str, updates: schemas.StoryUpdate) -> Optional[dict]:
    with locked(STORIES_FILE):
        stories = load_stories()
        for story in stories:
            if story["id"] == story_id:
                for key, value in updates.model_dump(exclude_unset=True, exclude_none=True).items():
                    story[key] = value
                story["updated_at"] = utcnow().isoformat()
                save_stories(stories)
                return story
    return None


def delete_story(story_id: str) -> bool:
    with locked(STORIES_FILE):
        stories = load_stories()
        updated = [s for s in stories if s["id"] != story_id]
        if len(updated) == len(stories):
            return False
        save_stories(updated)
    return True


def like_story(story_id: str) -> Optional[dict]:
    ensure_object_id(story_id, "Story")
    with locked(STORIES_FILE):
        stories = load_stories()
        for story in stories:
            if story["id"] == story_id:
                story["likes"] = story.get("likes", 0) + 1
                save_stories(stories)
                return story
    return None
