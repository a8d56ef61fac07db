"""
Exceptions raised by the options service and its collaborators.
"""

from typing import Any, Iterable, Optional


class OptionError(Exception):
    """Base class for every options error."""


class UnknownOptionError(OptionError, KeyError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unknown option: {key!r}")

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class MissingValidatorConfigurationError(OptionError):
    """The schema entry is missing a field that `set` needs (normally `validators`)."""

    def __init__(self, key: str, missing_field: str):
        self.key = key
        self.missing_field = missing_field
        super().__init__(f"Option {key!r} has no {missing_field!r} configured")


class ValidationError(OptionError, ValueError):
    """A value was rejected by every validator kind it was checked against."""

    def __init__(
        self,
        value: Any,
        attempted_kinds: Iterable[str],
        reasons: Optional[dict] = None,
        key: Optional[str] = None,
    ):
        self.value           = value
        self.attempted_kinds = tuple(attempted_kinds)
        self.reasons         = dict(reasons or {})
        self.key             = key

        target = f"option {key!r}" if key else "value"
        message = f"Invalid {target}: {value!r} is not one of {', '.join(self.attempted_kinds)}"
        super().__init__(message)


class OptionsSchemaError(OptionError):
    """The option schema itself is malformed."""
