"""
Learning-module catalog and quiz grading, read from JSON collections.
"""

import os
import random
import logging
from typing import List, Optional, Tuple

from backend.authentication import utils as auth_utils
from backend.core.config import settings
from backend.core.exceptions import NotFoundError, ValidationError
from backend.core.schemas import Pagination, paginate
from backend.core.storage import ensure_object_id, load_json, save_json
from backend.modules import schemas

logger = logging.getLogger(__name__)

MODULES_FILE = os.path.join(settings.DATA_DIR, "modules", "modules.json")
QUIZZES_FILE = os.path.join(settings.DATA_DIR, "modules", "quizzes.json")

DIFFICULTY_RANK = {d: i for i, d in enumerate(schemas.Difficulty)}


def load_modules() -> List[schemas.Module]:
    return [schemas.Module(**m) for m in load_json(MODULES_FILE)]


def load_quizzes() -> List[schemas.Quiz]:
    return [schemas.Quiz(**q) for q in load_json(QUIZZES_FILE)]


def save_catalog(modules: List[schemas.Module], quizzes: List[schemas.Quiz]) -> None:
    derived = {"lesson_count", "total_estimated_time", "question_count", "total_points"}
    save_json(MODULES_FILE, [m.model_dump(mode="json", exclude=derived) for m in modules])
    save_json(QUIZZES_FILE, [q.model_dump(mode="json", exclude=derived) for q in quizzes])


def _visible(module: schemas.Module) -> bool:
    return module.is_published and module.is_active


def summarize(module: schemas.Module) -> schemas.ModuleSummary:
    return schemas.ModuleSummary(**module.model_dump(exclude={"lessons"}))


def filter_modules(
    modules: List[schemas.Module],
    difficulty: Optional[schemas.Difficulty] = None,
    category: Optional[str] = None,
    search: Optional[str] = None,
) -> List[schemas.Module]:
    modules = [m for m in modules if _visible(m)]
    if difficulty:
        modules = [m for m in modules if m.difficulty == difficulty]
    if category:
        modules = [m for m in modules if category.lower() in m.category.lower()]
    if search and search.strip():
        terms = search.lower().split()
        modules = [
            m for m in modules
            if any(t in f"{m.title} {m.description} {m.category}".lower() for t in terms)
        ]
    return modules


def sort_modules(modules: List[schemas.Module], sort_by: str = "createdAt", order: str = "desc") -> List[schemas.Module]:
    if sort_by not in schemas.SORTABLE_FIELDS:
        raise ValidationError(errors=[f"sortBy: must be one of {', '.join(schemas.SORTABLE_FIELDS)}"])
    if order not in ("asc", "desc"):
        raise ValidationError(errors=["sortOrder: must be asc or desc"])
    keys = {
        "createdAt": lambda m: (m.created_at, m.id),
        "title": lambda m: (m.title.lower(), m.id),
        "difficulty": lambda m: (DIFFICULTY_RANK[m.difficulty], m.id),
        "estimatedHours": lambda m: (m.estimated_hours, m.id),
    }
    return sorted(modules, key=keys[sort_by], reverse=order == "desc")


def list_modules(
    difficulty=None, category=None, search=None, page: int = 1, limit: int = 10,
    sort_by: str = "createdAt", order: str = "desc",
) -> Tuple[List[schemas.ModuleSummary], Pagination]:
    modules = sort_modules(filter_modules(load_modules(), difficulty, category, search), sort_by, order)
    items, pagination = paginate(modules, page, limit)
    return [summarize(m) for m in items], pagination


def get_module(module_id: str) -> schemas.Module:
    """A published, active module, or NotFoundError."""
    ensure_object_id(module_id, "Module")
    module = next((m for m in load_modules() if m.id == module_id and _visible(m)), None)
    if module is None:
        raise NotFoundError("Module")
    return module


def get_lessons(module_id: str) -> Tuple[str, List[schemas.Lesson]]:
    module = get_module(module_id)
    return module.title, sorted(module.lessons, key=lambda lesson: lesson.order)


def get_quiz(module_id: str) -> schemas.Quiz:
    get_module(module_id)
    quiz = next(
        (q for q in load_quizzes() if q.module == module_id and q.is_published and q.is_active),
        None,
    )
    if quiz is None:
        raise NotFoundError("Quiz")
    return quiz


def public_quiz(quiz: schemas.Quiz, rng: Optional[random.Random] = None) -> schemas.PublicQuiz:
    """Strip answers; shuffle questions/options when the quiz asks for it."""
    rng = rng or random.Random()
    questions = sorted(quiz.questions, key=lambda q: q.order)
    if quiz.randomize_questions:
        rng.shuffle(questions)

    public_questions = []
    for q in questions:
        options = [schemas.PublicOption(id=o.id, text=o.text) for o in q.options]
        if quiz.randomize_options:
            rng.shuffle(options)
        public_questions.append(schemas.PublicQuestion(
            id=q.id, question_text=q.question_text, options=options,
            points=q.points, type=q.type, order=q.order,
        ))

    return schemas.PublicQuiz(
        id=quiz.id,
        title=quiz.title,
        description=quiz.description,
        module=quiz.module,
        questions=public_questions,
        time_limit=quiz.time_limit,
        passing_score=quiz.passing_score,
        question_count=quiz.question_count,
        total_points=quiz.total_points,
    )


def grade_quiz(quiz: schemas.Quiz, submission: schemas.QuizSubmission) -> schemas.QuizResult:
    """A question earns its points only when the chosen options equal the correct set."""
    unknown = set(submission.answers) - {q.id for q in quiz.questions}
    if unknown:
        raise ValidationError(errors=[f"answers: unknown question id {qid}" for qid in sorted(unknown)])

    score = 0
    results = []
    for q in sorted(quiz.questions, key=lambda q: q.order):
        chosen = set(submission.answers.get(q.id, []))
        correct = chosen == q.correct_ids
        earned = q.points if correct else 0
        score += earned
        results.append(schemas.QuestionResult(
            question_id=q.id,
            correct=correct,
            points_earned=earned,
            correct_option_ids=sorted(q.correct_ids) if quiz.show_correct_answers else None,
            explanation=q.explanation if quiz.show_explanations else None,
        ))

    total = quiz.total_points
    percentage = round(score * 100 / total, 2) if total else 0.0
    return schemas.QuizResult(
        quiz_id=quiz.id,
        score=score,
        total_points=total,
        percentage=percentage,
        passed=percentage >= quiz.passing_score,
        points_awarded=score,
        results=results,
    )


def submit_quiz(module_id: str, user_id: str, submission: schemas.QuizSubmission) -> schemas.QuizResult:
    """Grade a submission and credit the earned points to the user."""
    quiz = get_quiz(module_id)
    result = grade_quiz(quiz, submission)
    if result.points_awarded:
        auth_utils.add_points(user_id, result.points_awarded)
    logger.info("Quiz %s submitted by %s: %s/%s", quiz.id, user_id, result.score, result.total_points)
    return result
