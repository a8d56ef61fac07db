"""
Validation helper: runs a value through an ordered list of validator kinds.

The first kind that accepts the value wins and its normalized value is used.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from options.exceptions import OptionsSchemaError, ValidationError
from validation.validators import VALIDATORS, RejectedValue

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    ok:      bool
    value:   Any = None
    kind:    Optional[str] = None
    reasons: dict = field(default_factory=dict)


class ValidationHelper:
    def __init__(self, validators: Optional[dict[str, Callable[[Any], Any]]] = None):
        self.validators = dict(VALIDATORS if validators is None else validators)

    def is_known(self, kind: str) -> bool:
        return kind in self.validators

    def check(self, value: Any, kinds: Iterable[str]) -> ValidationResult:
        """
        Try each kind in order and report the outcome.

        Rejections are collected per kind in `reasons`; an unknown kind is a
        schema defect and raises OptionsSchemaError instead.
        """
        reasons = {}
        for kind in kinds:
            validator = self.validators.get(kind)
            if validator is None:
                raise OptionsSchemaError(f"Unknown validator kind: {kind!r}")
            try:
                normalized = validator(value)
            except RejectedValue as exc:
                reasons[kind] = exc.reason
                continue
            logger.debug("Value %r accepted as %s", value, kind)
            return ValidationResult(ok=True, value=normalized, kind=kind, reasons=reasons)

        return ValidationResult(ok=False, reasons=reasons)

    def validate_as(self, value: Any, kinds: Iterable[str]) -> Any:
        kinds = tuple(kinds)
        result = self.check(value, kinds)
        if not result.ok:
            raise ValidationError(value, kinds, reasons=result.reasons)
        return result.value
