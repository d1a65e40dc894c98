from app.utils.ai_component.base import BaseAIService
from app.utils.ai_component.lessons import LessonGeneratorMixin
from app.utils.ai_component.translation import TranslationCheckerMixin
from app.utils.ai_component.tutor import TutorFeedbackMixin


class AIService(
    BaseAIService,
    TranslationCheckerMixin,
    TutorFeedbackMixin,
    LessonGeneratorMixin,
):
    """
    Service to interact with the LLM API
    Combines all functionality from mixins
    """

    pass


# Create singleton instance
ai_service = AIService()
