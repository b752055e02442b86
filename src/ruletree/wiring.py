"""Composition root: the single place where services get their adapters.

Call ``build_classification_service()`` to get a service with the rule set
from ``rules_path`` already loaded.
"""

from __future__ import annotations

from .adapters.json_source import JsonFileRuleSource
from .config.runtime import RuntimeSettings, get_settings
from .models.responses import BuildReport
from .services.classification_service import ClassificationService


def build_classification_service(
    settings: RuntimeSettings | None = None,
) -> tuple[ClassificationService, BuildReport | None]:
    """Construct a ClassificationService; load rules when ``rules_path`` is set.

    Raises:
        ValueError: if ``rules_path`` is set but ``attribute_order`` is empty.
    """
    settings = settings or get_settings()
    service = ClassificationService(
        attribute_order=settings.attribute_order,
        unknown_attribute_policy=settings.unknown_attribute_policy,
        max_batch_size=settings.max_batch_size,
    )
    report = None
    if settings.rules_path is not None:
        # an empty order compiles to a single leaf holding every rule
        if not settings.attribute_order:
            raise ValueError("RULETREE_ATTRIBUTE_ORDER is not set; cannot build an index without attributes")
        report = service.load_from(JsonFileRuleSource(settings.rules_path))
    return service, report
