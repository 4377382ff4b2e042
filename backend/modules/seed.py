"""
Load sample modules and quizzes into the catalog (replaces existing ones).

    python -m backend.modules.seed
"""

import logging
from typing import List, Tuple

from backend.core.logging_config import setup_logging
from backend.core.storage import new_object_id, utcnow
from backend.modules import schemas, utils

logger = logging.getLogger(__name__)


def _lessons(items) -> List[schemas.Lesson]:
    return [schemas.Lesson(id=new_object_id(), order=i + 1, **item) for i, item in enumerate(items)]


def _question(order: int, text: str, options, explanation: str, points: int = 1, qtype="single-choice") -> schemas.Question:
    return schemas.Question(
        id=new_object_id(),
        question_text=text,
        options=[schemas.Option(id=new_object_id(), text=t, is_correct=c) for t, c in options],
        explanation=explanation,
        points=points,
        type=qtype,
        order=order,
    )


def build_catalog() -> Tuple[List[schemas.Module], List[schemas.Quiz]]:
    now = utcnow()
    cyber = schemas.Module(
        id=new_object_id(),
        title="Cyberbullying Awareness",
        description="Learn about cyberbullying, its impact, and how to prevent it.",
        difficulty="beginner",
        duration="2-3 hours",
        estimated_hours=2.5,
        category="Online Safety",
        tags=["cyberbullying", "online safety", "digital citizenship"],
        is_published=True,
        lessons=_lessons([
            {"title": "Understanding Cyberbullying",
             "content": "Cyberbullying is bullying that takes place over digital devices.", "estimated_time": 15},
            {"title": "Types of Cyberbullying",
             "content": "Harassment, flaming, exclusion, outing and cyberstalking.", "estimated_time": 20},
            {"title": "Impact of Cyberbullying", "type": "video",
             "content": "Psychological, emotional and academic effects on victims.",
             "video_url": "https://www.youtube.com/watch?v=6ctd75a7_Yw", "estimated_time": 25},
        ]),
        created_at=now,
        updated_at=now,
    )
    fire = schemas.Module(
        id=new_object_id(),
        title="Fire Safety at School",
        description="Evacuation routes, alarms, and what to do when you discover a fire.",
        difficulty="beginner",
        duration="1 hour",
        estimated_hours=1,
        category="Physical Safety",
        tags=["fire", "evacuation"],
        is_published=True,
        lessons=_lessons([
            {"title": "Know Your Exits", "content": "Find two ways out of every room.", "estimated_time": 10},
            {"title": "During an Alarm", "content": "Stay low, do not use lifts, go to the assembly point.",
             "estimated_time": 10},
        ]),
        created_at=now,
        updated_at=now,
    )

    quizzes = [
        schemas.Quiz(
            id=new_object_id(),
            title="Cyberbullying Check",
            description="Test what you learned about cyberbullying.",
            module=cyber.id,
            is_published=True,
            randomize_options=True,
            questions=[
                _question(1, "Which of these is a form of cyberbullying?",
                          [("Sharing someone's private messages", True), ("Sending a birthday card", False),
                           ("Liking a friend's post", False)],
                          "Outing someone by sharing private content is cyberbullying.", points=2),
                _question(2, "Blocking and reporting a bully is a good first step.",
                          [("True", True), ("False", False)],
                          "Blocking stops contact; reporting gets adults involved.", qtype="true-false"),
                _question(3, "Who can you tell about cyberbullying?",
                          [("A teacher", True), ("A parent", True), ("Nobody", False)],
                          "Any trusted adult can help.", points=2, qtype="multiple-choice"),
            ],
            created_at=now,
            updated_at=now,
        ),
        schemas.Quiz(
            id=new_object_id(),
            title="Fire Drill Quiz",
            module=fire.id,
            is_published=True,
            questions=[
                _question(1, "Should you use the lift during a fire alarm?",
                          [("Yes", False), ("No", True)], "Lifts can fail during a fire."),
            ],
            created_at=now,
            updated_at=now,
        ),
    ]
    return [cyber, fire], quizzes


def main() -> None:
    setup_logging()
    modules, quizzes = build_catalog()
    utils.save_catalog(modules, quizzes)
    logger.info("Seeded %d modules and %d quizzes", len(modules), len(quizzes))


if __name__ == "__main__":
    main()
