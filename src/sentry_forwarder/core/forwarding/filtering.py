# src/sentry_forwarder/core/forwarding/filtering.py
"""
Suppression rules: which records never reach the sink.

Three kinds of rules apply, in this order:
  1. level allow-list (only warning/error can be configured),
  2. category rules: include list (empty = everything) and except set; a rule
     ending in "*" matches by prefix, anything else must match exactly,
  3. free-text regular expressions searched in the rendered message.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from typing import Iterable, Iterator, Sequence

from sentry_forwarder.validators.config_validators import valid_status_codes

from .records import HostLogRecord, http_exception_category

logger = logging.getLogger(__name__)

# Records from the framework message source (missing translations and the like).
MESSAGE_SOURCE_CATEGORY = "i18n.message_source:*"
# Records the Sentry SDK logs about itself; forwarding them would loop.
SENTRY_SDK_CATEGORY = "sentry_sdk.*"
# Records the forwarder logs about its own failures.
FORWARDER_CATEGORY = "sentry_forwarder.core.*"

INTERNAL_EXCEPT_CATEGORIES = frozenset({MESSAGE_SOURCE_CATEGORY, SENTRY_SDK_CATEGORY, FORWARDER_CATEGORY})


def build_except_categories(configured: Iterable[str], except_codes: Iterable) -> frozenset[str]:
    """
    Union of the configured except categories, the internal ones and one
    "http-exception:<code>" rule per valid status code.
    """
    rules = set(configured) | INTERNAL_EXCEPT_CATEGORIES
    rules.update(http_exception_category(code) for code in valid_status_codes(except_codes))
    return frozenset(rules)


def category_matches(category: str, rule: str) -> bool:
    if rule.endswith("*"):
        return category.startswith(rule[:-1])
    return category == rule


def filter_records(
    records: Iterable[HostLogRecord],
    levels: Iterable[int],
    categories: Sequence[str] = (),
    except_categories: Iterable[str] = (),
) -> Iterator[HostLogRecord]:
    """Yield the records passing the level and category rules, preserving order."""
    allowed = frozenset(int(level) for level in levels)
    excepted = tuple(except_categories)

    for record in records:
        try:
            level = int(record.level)
        except (TypeError, ValueError):
            continue
        if level not in allowed:
            continue
        if categories and not any(category_matches(record.category, rule) for rule in categories):
            continue
        if any(category_matches(record.category, rule) for rule in excepted):
            continue
        yield record


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern)


def pattern_matches(pattern: str, message: str) -> bool:
    """
    re.search(pattern, message), except that an invalid pattern (or any failure
    while matching) counts as no match.
    """
    if not pattern:
        return False
    try:
        return _compile(pattern).search(message) is not None
    except Exception:
        logger.debug("Ignoring unusable suppression pattern %r", pattern, exc_info=True)
        return False


def matching_pattern(message: str, patterns: Sequence[str]) -> str | None:
    """First pattern (in configured order) matching `message`, or None."""
    for pattern in patterns:
        if pattern_matches(pattern, message):
            return pattern
    return None


__all__ = [
    "MESSAGE_SOURCE_CATEGORY",
    "SENTRY_SDK_CATEGORY",
    "FORWARDER_CATEGORY",
    "INTERNAL_EXCEPT_CATEGORIES",
    "build_except_categories",
    "category_matches",
    "filter_records",
    "pattern_matches",
    "matching_pattern",
]
