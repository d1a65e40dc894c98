from .ai import router as ai_router
from .auth import router as auth_router
from .exercise import router as exercise_router
from .lesson import router as lesson_router
from .user import router as user_router

routes = [
    auth_router,
    user_router,
    lesson_router,
    exercise_router,
    ai_router,
]
