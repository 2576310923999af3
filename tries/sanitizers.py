# tries/sanitizers.py
"""
Input sanitization for try content.

All user-generated text should pass through these functions
before being stored or rendered.
"""
import re
from datetime import date
from typing import List, Optional

import bleach


# Descriptions are stored as plain text; any markup is stripped
ALLOWED_TAGS = set()


def sanitize_text(text: Optional[str], max_length: Optional[int] = None, strip: bool = True) -> str:
    """
    - Strips leading/trailing whitespace
    - Removes control characters except newlines and tabs
    - Enforces maximum length
    """
    if text is None:
        return ""

    if strip:
        text = text.strip()

    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_title(title: Optional[str]) -> str:
    """Single line, no markup, max 255 characters."""
    text = bleach.clean(sanitize_text(title, max_length=255), tags=ALLOWED_TAGS, strip=True)
    text = re.sub(r'[\r\n]+', ' ', text)
    text = re.sub(r'\s+', ' ', text)
    return text


def sanitize_description(description: Optional[str]) -> str:
    if description is None:
        return ""
    clean = bleach.clean(description.strip(), tags=ALLOWED_TAGS, strip=True)
    return sanitize_text(clean, max_length=10000)


def normalize_tags(tags, max_tags: int) -> List[str]:
    """
    Trim, drop empties and duplicates (first occurrence wins).
    Raises ValueError when more than max_tags remain.
    """
    result = []
    for tag in tags or []:
        tag = sanitize_text(str(tag), max_length=50)
        if tag and tag not in result:
            result.append(tag)

    if len(result) > max_tags:
        raise ValueError(f"タグは最大{max_tags}個までです")
    return result


def normalize_dates(dates) -> List[str]:
    """
    Validate ISO dates ("2024-05-01"), dedupe and sort them.
    Raises ValueError on bad input or an empty list.
    """
    result = set()
    for value in dates or []:
        try:
            result.add(date.fromisoformat(str(value).strip()[:10]).isoformat())
        except ValueError:
            raise ValueError(f"Invalid date: {value}")

    if not result:
        raise ValueError("日程を1つ以上指定してください")
    return sorted(result)
