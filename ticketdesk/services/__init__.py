"""
Business Logic Services
"""
from .llm_service import LLMService
from .document_search import DocumentSearchService

__all__ = [
    "LLMService",
    "DocumentSearchService",
]
