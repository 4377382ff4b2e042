from fastapi import APIRouter, Depends, status
from backend.authentication.schemas import TokenData
from backend.authentication.security import get_current_user
from backend.core.exceptions import ForbiddenError, NotFoundError
from backend.stories import utils, schemas

router = APIRouter(prefix="/stories", tags=["Stories"])


@router.get("", response_model=schemas.StoryListResponse)
def list_stories():
    """All success stories, newest first (public)."""
    stories = utils.list_stories()
    return {"success": True, "count": len(stories), "data": stories}


@router.get("/{story_id}", response_model=schemas.StoryResponse)
def get_story(story_id: str):
    return {"success": True, "data": utils.get_story(story_id)}


@router.post("", response_model=schemas.StoryResponse, status_code=status.HTTP_201_CREATED)
def add_story(story: schemas.StoryCreate, current_user: TokenData = Depends(get_current_user)):
    created = utils.add_story(story, current_user.user_id, current_user.username)
    return {"success": True, "data": created}


@router.put("/{story_id}", response_model=schemas.StoryResponse)
def edit_story(story_id: str, updates: schemas.StoryUpdate, current_user: TokenData = Depends(get_current_user)):
    """Edit a story (author only)."""
    story = utils.get_story(story_id)
    if story["author"] != current_user.user_id:
        raise ForbiddenError("Not authorized to update this story")

    updated = utils.update_story(story_id, updates)
    if not updated:
        raise NotFoundError("Story")
    return {"success": True, "data": updated}


@router.delete("/{story_id}")
def delete_story(story_id: str, current_user: TokenData = Depends(get_current_user)):
    """Delete a story (author only)."""
    story = utils.get_story(story_id)
    if story["author"] != current_user.user_id:
        raise ForbiddenError("Not authorized to delete this story")

    if not utils.delete_story(story_id):
        raise NotFoundError("Story")
    return {"success": True, "data": {}}


@router.post("/{story_id}/like", response_model=schemas.StoryResponse)
def like_story(story_id: str, current_user: TokenData = Depends(get_current_user)):
    liked = utils.like_story(story_id)
    if not liked:
        raise NotFoundError("Story")
    return {"success": True, "data": liked}
