from .business_data import build_business_data
from .client import GeminiClient, get_ai_client
from .service import AIAnalytics

__all__ = [
    "build_business_data",
    "GeminiClient",
    "get_ai_client",
    "AIAnalytics",
]
