"""
Models package initialization
Import all models and setup relationships
"""

from .attempt import Attempt
from .exercise import Exercise, ExerciseQuestion
from .lesson import Lesson
from .lesson_block import LessonBlock
from .question import Question

# Import and setup relationships
from .relations import setup_relationships
from .unit import Unit
from .user import User

# Setup all relationships after models are imported
setup_relationships()

# Make models available at package level
__all__ = [
    "Attempt",
    "Exercise",
    "ExerciseQuestion",
    "Lesson",
    "LessonBlock",
    "Question",
    "Unit",
    "User",
]
