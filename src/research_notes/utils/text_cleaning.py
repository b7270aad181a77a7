from __future__ import annotations

import html
import re
from typing import Any, List


def clean_text(text: str | None) -> str:
    """Clean title-style text from imported records.

    - Decode HTML entities (e.g. &agrave; -> à)
    - Strip HTML tags while keeping inner text
    - Simplify Markdown links/bold/italics
    - Normalize whitespace
    """

    if not text:
        return ""

    text = html.unescape(text)

    # Remove HTML tags (e.g. <b>text</b> -> text)
    text = re.sub(r"<[^>]+>", "", text)

    # Markdown links: [Text](url) -> Text
    text = re.sub(r"\[([^\]]+)\]\([^\)]+\)", r"\1", text)

    # Markdown bold/italics: **Text** / __Text__ / *Text* -> Text
    text = re.sub(r"[\*_]{2,}(.*?)[\*_]{2,}", r"\1", text)
    text = re.sub(r"\*(.*?)\*", r"\1", text)

    text = text.replace("\r\n", " ").replace("\n", " ")
    text = re.sub(r"\s+", " ", text)

    return text.strip()


def collapse_whitespace(text: str | None) -> str:
    """Trim and collapse runs of whitespace (newlines included) to one space."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def strip_code_fence(text: str | None) -> str:
    """Remove a surrounding ``` or ```json fence from a model reply."""
    if not text:
        return ""
    s = text.strip()
    match = re.match(r"^```[a-zA-Z]*\s*(.*?)\s*```$", s, flags=re.S)
    return match.group(1).strip() if match else s


def clean_names(value: Any) -> List[str]:
    """Normalize a list of person names.

    - Treat "N/A", "NONE", "NULL" or empty as no names
    - Accept a list, or a single string split on semicolons
    - Strip whitespace and drop empties; order and duplicates are kept
    """

    if not value:
        return []

    if isinstance(value, (list, tuple)):
        parts = [str(v) for v in value if v is not None]
    else:
        parts = str(value).split(";")

    names = [p.strip() for p in parts]
    return [n for n in names if n and n.upper() not in {"N/A", "N_A", "NONE", "NULL"}]
