from fastapi import APIRouter, Depends, Query
from typing import Optional
from backend.authentication.schemas import TokenData
from backend.authentication.security import get_current_user
from backend.core.config import settings
from backend.modules import utils, schemas

router = APIRouter(prefix="/modules", tags=["Modules"])


@router.get("", response_model=schemas.ModuleListResponse)
def list_modules(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    difficulty: Optional[schemas.Difficulty] = Query(None),
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None, max_length=200),
    sort_by: str = Query("createdAt", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
):
    """Published modules, without lessons (public)."""
    modules, pagination = utils.list_modules(
        difficulty, category, search, page=page, limit=limit, sort_by=sort_by, order=sort_order
    )
    return {"success": True, "data": {"modules": modules, "pagination": pagination}}


@router.get("/{module_id}", response_model=schemas.ModuleResponse)
def get_module(module_id: str):
    return {"success": True, "data": {"module": utils.get_module(module_id)}}


@router.get("/{module_id}/lessons", response_model=schemas.LessonsResponse)
def get_lessons(module_id: str):
    title, lessons = utils.get_lessons(module_id)
    return {"success": True, "data": {"module_title": title, "lessons": lessons}}


@router.get("/{module_id}/quiz", response_model=schemas.QuizResponse)
def get_quiz(module_id: str):
    """The module's quiz with correct answers hidden."""
    quiz = utils.get_quiz(module_id)
    return {"success": True, "data": {"quiz": utils.public_quiz(quiz)}}


@router.post("/{module_id}/quiz/submit", response_model=schemas.QuizResultResponse)
def submit_quiz(
    module_id: str,
    submission: schemas.QuizSubmission,
    current_user: TokenData = Depends(get_current_user),
):
    result = utils.submit_quiz(module_id, current_user.user_id, submission)
    message = "Quiz passed" if result.passed else "Quiz not passed"
    return {"success": True, "message": message, "data": result}
