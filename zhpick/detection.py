"""Cheap containment checks for Chinese text."""

from __future__ import annotations

import re

CHINESE_PATTERN = re.compile(r"[\u4e00-\u9fa5]")


def contains_chinese(text: str) -> bool:
    """Detect whether the text contains at least one CJK ideograph."""

    return CHINESE_PATTERN.search(text) is not None
