"""Application services."""

from .classification_service import ClassificationService

__all__ = ["ClassificationService"]
