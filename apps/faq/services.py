"""FAQ data loading."""

from __future__ import annotations

import logging

from .defaults import DEFAULT_FAQS
from .models import FAQ

logger = logging.getLogger(__name__)


def ensure_default_faqs() -> int:
    """Create missing starter FAQs, matched by question; edited entries stay untouched."""
    created = 0
    for defaults in DEFAULT_FAQS:
        values = dict(defaults)
        question = values.pop("question")
        _, was_created = FAQ.objects.get_or_create(question=question, defaults=values)
        created += int(was_created)
    if created:
        logger.info(f"Created {created} default FAQs")
    return created
