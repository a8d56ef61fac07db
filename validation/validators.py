"""
Validator kinds for option values.

Each validator takes a raw value and returns the normalized value, or raises
RejectedValue. Validators never fall back to another kind; chaining is done by
validation.helper.ValidationHelper.
"""

import re
from typing import Any, Callable
from urllib.parse import urlparse

from bs4 import BeautifulSoup

_WHITESPACE   = re.compile(r"\s+")
_EMAIL_RE     = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$")
_INTEGER_RE   = re.compile(r"^[+-]?\d+$")
_TWITTER_RE   = re.compile(r"^@?(\w{1,15})$")
_TWITTER_URL  = re.compile(r"^https?://(?:www\.)?(?:twitter|x)\.com/(\w{1,15})/?$", re.IGNORECASE)

_TRUE_WORDS   = {"true", "1", "yes", "on"}
_FALSE_WORDS  = {"false", "0", "no", "off"}


class RejectedValue(ValueError):
    def __init__(self, kind: str, value: Any, reason: str):
        self.kind   = kind
        self.value  = value
        self.reason = reason
        super().__init__(f"[{kind}] {reason}")


# Tags whose entire subtree is discarded before reading the text
_STRIP_TAGS = {"script", "style", "noscript", "template"}


def _clean_text(value: str) -> str:
    """Drop markup, decode entities, collapse whitespace and trim."""
    soup = BeautifulSoup(value, "html.parser")
    for tag in soup.find_all(_STRIP_TAGS):
        tag.decompose()
    return _WHITESPACE.sub(" ", soup.get_text(" ", strip=True)).strip()


def _require_str(kind: str, value: Any) -> str:
    if not isinstance(value, str):
        raise RejectedValue(kind, value, f"expected a string, got {type(value).__name__}")
    return value


# ── Strings ───────────────────────────────────────────────────────────────────

def validate_string(value: Any) -> str:
    return _clean_text(_require_str("string", value))


def validate_empty_string(value: Any) -> str:
    text = _require_str("empty_string", value)
    if text.strip():
        raise RejectedValue("empty_string", value, "string is not empty")
    return ""


def validate_non_empty_string(value: Any) -> str:
    text = _clean_text(_require_str("non_empty_string", value))
    if not text:
        raise RejectedValue("non_empty_string", value, "string is empty")
    return text


# ── Web identifiers ───────────────────────────────────────────────────────────

def validate_url(value: Any) -> str:
    url = _require_str("url", value).strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise RejectedValue("url", value, "URL must use http or https")
    if not parsed.netloc:
        raise RejectedValue("url", value, "URL has no host")
    return url


def validate_email(value: Any) -> str:
    email = _require_str("email", value).strip()
    if not _EMAIL_RE.match(email):
        raise RejectedValue("email", value, "not an email address")
    return email.lower()


def validate_twitter_username(value: Any) -> str:
    """Accept '@name', 'name' or a profile URL and return the bare username."""
    text = _require_str("twitter_username", value).strip()
    match = _TWITTER_URL.match(text) or _TWITTER_RE.match(text)
    if not match:
        raise RejectedValue("twitter_username", value, "not a Twitter username")
    return match.group(1)


# ── Scalars ───────────────────────────────────────────────────────────────────

def validate_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise RejectedValue("boolean", value, "not a boolean")


def validate_integer(value: Any) -> int:
    if isinstance(value, bool):
        raise RejectedValue("integer", value, "booleans are not integers")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INTEGER_RE.match(value.strip()):
        return int(value.strip())
    raise RejectedValue("integer", value, "not an integer")


VALIDATORS: dict[str, Callable[[Any], Any]] = {
    "string":           validate_string,
    "empty_string":     validate_empty_string,
    "non_empty_string": validate_non_empty_string,
    "url":              validate_url,
    "email":            validate_email,
    "twitter_username": validate_twitter_username,
    "boolean":          validate_boolean,
    "integer":          validate_integer,
}
