import html
import re
from typing import Optional


def sanitize_string(value: Optional[str]) -> Optional[str]:
    """
    Sanitize a string by escaping HTML special characters to prevent XSS.
    Returns None if input is None.
    """
    if value is None:
        return None
    if not isinstance(value, str):
        return value
    return html.escape(str(value), quote=True)


def sanitize_text(value: Optional[str]) -> Optional[str]:
    """
    Trim, strip control characters and HTML-escape free text before storage.
    Blank input collapses to None.
    """
    if value is None:
        return None

    value = str(value).strip()
    if not value:
        return None

    value = re.sub(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]", "", value)
    return sanitize_string(value)
