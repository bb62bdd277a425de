"""
Log sanitization utilities to prevent credential and personal data leakage.

This module provides functions to sanitize sensitive information before logging.
Habitica requests carry the account's user ID and API key in plain headers, and
task texts are free-form user content, so neither should reach the logs as-is.
"""

import re
from typing import Dict, Mapping, Optional


# Credential headers, by lower-cased name, and how each is masked
SENSITIVE_HEADERS = {
    'x-api-key': 'secret',
    'x-api-user': 'identifier',
}


def sanitize_secret(secret: Optional[str]) -> str:
    """
    Sanitize an API key or similar secret for logging.

    Args:
        secret: The secret to sanitize

    Returns:
        Sanitized secret representation

    Example:
        "0123456789abcdef" -> "[secret: ...cdef] (16 chars)"
    """
    if not secret:
        return "[no-secret]"

    if len(secret) <= 8:
        return f"[secret] ({len(secret)} chars)"
    return f"[secret: ...{secret[-4:]}] ({len(secret)} chars)"


def sanitize_identifier(identifier: Optional[str]) -> str:
    """
    Sanitize a user or task identifier for logging.

    Args:
        identifier: Identifier to sanitize

    Returns:
        Sanitized identifier representation
    """
    if not identifier:
        return "[no-id]"

    # Show only first 8 characters of a UUID-like identifier
    if len(identifier) <= 12:
        return f"[id: {identifier}]"
    return f"[id: {identifier[:8]}...]"


def sanitize_task_text(text: Optional[str], max_preview_length: int = 20) -> str:
    """
    Sanitize task text for logging.

    Args:
        text: Task text to sanitize
        max_preview_length: Maximum characters to show from the text

    Returns:
        Sanitized text representation
    """
    if not text:
        return "[empty-text]"

    # Replace email addresses that users sometimes paste into tasks
    preview = re.sub(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b', '[EMAIL]', text)
    preview = preview[:max_preview_length]
    if len(text) > max_preview_length:
        preview += "..."

    return f"'{preview}' ({len(text)} chars)"


def sanitize_headers(headers: Mapping[str, str]) -> Dict[str, str]:
    """
    Sanitize request headers for logging, masking credential headers.

    Args:
        headers: Header mapping

    Returns:
        Copy of the headers with credentials masked
    """
    sanitized = {}
    for key, value in headers.items():
        kind = SENSITIVE_HEADERS.get(key.lower())
        if kind == 'secret':
            sanitized[key] = sanitize_secret(value)
        elif kind == 'identifier':
            sanitized[key] = sanitize_identifier(value)
        else:
            sanitized[key] = value
    return sanitized


def sanitize_for_logging(**kwargs) -> dict:
    """
    Sanitize multiple fields for logging in one call.

    Args:
        **kwargs: Fields to sanitize (api_key, user_id, text, headers, etc.)

    Returns:
        Dictionary with sanitized values
    """
    sanitized = {}

    for key, value in kwargs.items():
        if key in ('api_key', 'secret'):
            sanitized[key] = sanitize_secret(value)
        elif key in ('user_id', 'task_id'):
            sanitized[key] = sanitize_identifier(value)
        elif key == 'text':
            sanitized[key] = sanitize_task_text(value) if value else None
        elif key == 'headers' and isinstance(value, Mapping):
            sanitized[key] = sanitize_headers(value)
        else:
            # For other fields, just include as-is (non-sensitive data)
            sanitized[key] = value

    return sanitized
