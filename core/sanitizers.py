"""
Input sanitization and validation for the hub.

All user-generated content should pass through these functions
before being stored or rendered.
"""
import re
from decimal import Decimal, InvalidOperation
from typing import Optional

import bleach


# Allowed HTML tags for rich text (post/event content)
ALLOWED_TAGS = [
    'p', 'br', 'strong', 'em', 'u', 'a', 'ul', 'ol', 'li',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'blockquote', 'code', 'pre', 'img'
]

ALLOWED_ATTRIBUTES = {
    'a': ['href', 'title'],
    'img': ['src', 'alt'],
}

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 2000
CONTENT_MAX_LENGTH = 50000


class ValidationError(Exception):
    """Raised when validation fails."""
    pass


def sanitize_text(text: Optional[str], max_length: Optional[int] = None, strip: bool = True) -> str:
    """
    Sanitize plain text input.

    - Strips leading/trailing whitespace
    - Removes control characters
    - Enforces maximum length
    - Returns empty string for None input
    """
    if text is None:
        return ""

    if strip:
        text = text.strip()

    # Remove control characters except newlines and tabs
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_html(html: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Sanitize HTML content, removing dangerous elements.
    """
    if html is None:
        return ""

    clean = bleach.clean(
        html.strip(),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True
    )

    if max_length and len(clean) > max_length:
        clean = clean[:max_length]

    return clean


def sanitize_title(title: Optional[str]) -> str:
    """
    Sanitize post/event titles.

    - Single line (no newlines)
    """
    text = sanitize_text(title)
    # Replace newlines with spaces
    text = re.sub(r'[\r\n]+', ' ', text)
    # Collapse multiple spaces
    text = re.sub(r'\s+', ' ', text)
    return text


def sanitize_description(description: Optional[str]) -> str:
    """Summary shown on cards; limited HTML allowed."""
    return sanitize_html(description, max_length=DESCRIPTION_MAX_LENGTH)


def sanitize_content(content: Optional[str]) -> str:
    return sanitize_html(content, max_length=CONTENT_MAX_LENGTH)


def sanitize_tags(tags) -> list:
    """
    Trimmed, non-empty, de-duplicated strings in their original order.
    """
    if tags is None:
        return []
    if not isinstance(tags, (list, tuple)):
        raise ValidationError("Tags must be a list of strings")

    cleaned = []
    for tag in tags:
        if not isinstance(tag, str):
            raise ValidationError("Tags must be a list of strings")
        tag = sanitize_title(tag)[:50]
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def validate_price(value, min_value: Decimal = Decimal('0'), max_value: Decimal = Decimal('999999.99')) -> Decimal:
    """
    Validate event price.

    - Must be a valid decimal
    - Must be non-negative
    - Maximum 2 decimal places
    """
    try:
        if isinstance(value, str):
            value = value.strip()
            if value == '':
                value = '0'
        price = Decimal(str(value))
    except (TypeError, ValueError, InvalidOperation):
        raise ValidationError("Price must be a valid number")

    if price < min_value:
        raise ValidationError(f"Price must be at least {min_value}")

    if price > max_value:
        raise ValidationError(f"Price cannot exceed {max_value}")

    return price.quantize(Decimal('0.01'))


def validate_url(url: Optional[str], required: bool = False) -> Optional[str]:
    """
    Validate and sanitize http(s) URLs.
    """
    if not url:
        if required:
            raise ValidationError("URL is required")
        return None

    url = sanitize_text(url, max_length=2048)

    pattern = r'^https?://[^\s<>"{}|\\^`\[\]]+$'
    if not re.match(pattern, url):
        raise ValidationError("Registration link must be a valid URL")

    return url
