from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, computed_field, model_validator

from backend.core.schemas import CamelModel, Pagination


class Difficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class LessonType(str, Enum):
    text = "text"
    video = "video"
    image = "image"
    interactive = "interactive"


class QuestionType(str, Enum):
    single_choice = "single-choice"
    multiple_choice = "multiple-choice"
    true_false = "true-false"


SORTABLE_FIELDS = ("createdAt", "title", "difficulty", "estimatedHours")


# ────────────────────────────────
# Modules and lessons
# ────────────────────────────────
class Lesson(CamelModel):
    id: str
    title: str = Field(max_length=200)
    content: str
    type: LessonType = LessonType.text
    video_url: Optional[str] = None
    image_url: Optional[str] = None
    order: int = Field(ge=1)
    estimated_time: int = Field(default=5, ge=1)  # minutes

    @model_validator(mode="after")
    def media_url_present(self):
        if self.type == LessonType.video and not (self.video_url or "").startswith(("http://", "https://")):
            raise ValueError("Valid video URL is required for video lessons")
        if self.type == LessonType.image and not (self.image_url or "").startswith(("http://", "https://")):
            raise ValueError("Valid image URL is required for image lessons")
        return self


class Module(CamelModel):
    id: str
    title: str = Field(max_length=200)
    description: str = Field(max_length=1000)
    difficulty: Difficulty
    duration: str
    estimated_hours: float = Field(ge=0.5, le=100)
    category: str = Field(max_length=50)
    tags: List[str] = []
    lessons: List[Lesson] = []
    is_published: bool = False
    is_active: bool = True
    thumbnail: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @computed_field(alias="lessonCount")
    @property
    def lesson_count(self) -> int:
        return len(self.lessons)

    @computed_field(alias="totalEstimatedTime")
    @property
    def total_estimated_time(self) -> int:
        return sum(lesson.estimated_time for lesson in self.lessons)


class ModuleSummary(CamelModel):
    """List view: a module without its lessons."""

    id: str
    title: str
    description: str
    difficulty: Difficulty
    duration: str
    estimated_hours: float
    category: str
    tags: List[str] = []
    thumbnail: Optional[str] = None
    lesson_count: int
    total_estimated_time: int
    created_at: datetime


# ────────────────────────────────
# Quizzes
# ────────────────────────────────
class Option(CamelModel):
    id: str
    text: str = Field(max_length=500)
    is_correct: bool = False


class Question(CamelModel):
    id: str
    question_text: str = Field(max_length=1000)
    options: List[Option]
    explanation: Optional[str] = Field(default=None, max_length=1000)
    points: int = Field(default=1, ge=1, le=10)
    type: QuestionType = QuestionType.single_choice
    order: int = Field(ge=1)

    @model_validator(mode="after")
    def check_options(self):
        if len(self.options) < 2:
            raise ValueError("Each question must have at least 2 options")
        correct = [o for o in self.options if o.is_correct]
        if not correct:
            raise ValueError("Each question must have at least one correct answer")
        if self.type != QuestionType.multiple_choice and len(correct) > 1:
            raise ValueError("Single-choice questions can only have one correct answer")
        return self

    @property
    def correct_ids(self) -> set:
        return {o.id for o in self.options if o.is_correct}


class Quiz(CamelModel):
    id: str
    title: str = Field(max_length=200)
    description: Optional[str] = Field(default=None, max_length=500)
    module: str
    questions: List[Question]
    is_published: bool = False
    is_active: bool = True
    time_limit: int = Field(default=30, ge=5, le=180)  # minutes
    passing_score: int = Field(default=70, ge=0, le=100)  # percent
    show_correct_answers: bool = True
    show_explanations: bool = True
    randomize_questions: bool = False
    randomize_options: bool = False
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="after")
    def has_questions(self):
        if not self.questions:
            raise ValueError("Quiz must have at least one question")
        return self

    @computed_field(alias="questionCount")
    @property
    def question_count(self) -> int:
        return len(self.questions)

    @computed_field(alias="totalPoints")
    @property
    def total_points(self) -> int:
        return sum(q.points for q in self.questions)


class PublicOption(CamelModel):
    id: str
    text: str


class PublicQuestion(CamelModel):
    id: str
    question_text: str
    options: List[PublicOption]
    points: int
    type: QuestionType
    order: int


class PublicQuiz(CamelModel):
    """What a student sees before answering: no correct flags, no explanations."""

    id: str
    title: str
    description: Optional[str] = None
    module: str
    questions: List[PublicQuestion]
    time_limit: int
    passing_score: int
    question_count: int
    total_points: int


class QuizSubmission(CamelModel):
    answers: Dict[str, List[str]]


class QuestionResult(CamelModel):
    question_id: str
    correct: bool
    points_earned: int
    correct_option_ids: Optional[List[str]] = None
    explanation: Optional[str] = None


class QuizResult(CamelModel):
    quiz_id: str
    score: int
    total_points: int
    percentage: float
    passed: bool
    points_awarded: int
    results: List[QuestionResult]


# ────────────────────────────────
# Response envelopes
# ────────────────────────────────
class ModuleListData(CamelModel):
    modules: List[ModuleSummary]
    pagination: Pagination


class ModuleListResponse(BaseModel):
    success: bool = True
    data: ModuleListData


class ModuleData(CamelModel):
    module: Module


class ModuleResponse(BaseModel):
    success: bool = True
    data: ModuleData


class LessonsData(CamelModel):
    module_title: str
    lessons: List[Lesson]


class LessonsResponse(BaseModel):
    success: bool = True
    data: LessonsData


class QuizData(CamelModel):
    quiz: PublicQuiz


class QuizResponse(BaseModel):
    success: bool = True
    data: QuizData


class QuizResultResponse(BaseModel):
    success: bool = True
    message: str
    data: QuizResult
