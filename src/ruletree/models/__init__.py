"""Request/response models."""

from .requests import ClassifyRequest
from .responses import BuildReport, ClassifyResponse, ObjectMatch

__all__ = [
    "BuildReport",
    "ClassifyRequest",
    "ClassifyResponse",
    "ObjectMatch",
]
