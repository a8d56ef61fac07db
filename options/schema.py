"""
Option schema: per-key defaults and validator kinds, built from config.yaml.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from options.exceptions import OptionsSchemaError
from validation.validators import VALIDATORS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionEntry:
    key:        str
    default:    Any
    validators: Optional[tuple[str, ...]] = None
    # Consumed by SecondaryContextOptionsService, ignored by the base service
    exclude_from_secondary_context: bool = False


@dataclass
class OptionsConfig:
    backend_key: str
    options:     dict[str, OptionEntry] = field(default_factory=dict)
    secondary_backend_key: Optional[str] = None


def _parse_entry(key: str, raw: Any, known_kinds: Iterable[str]) -> OptionEntry:
    if not isinstance(raw, dict):
        raise OptionsSchemaError(f"Option {key!r} must be a mapping")
    if "default" not in raw:
        raise OptionsSchemaError(f"Option {key!r} has no default")

    validators = raw.get("validators")
    if validators is not None:
        if isinstance(validators, str) or not isinstance(validators, list):
            raise OptionsSchemaError(f"Option {key!r}: validators must be a list")
        if not all(isinstance(k, str) for k in validators):
            raise OptionsSchemaError(f"Option {key!r}: validator kinds must be strings")
        unknown = [k for k in validators if k not in known_kinds]
        if unknown:
            raise OptionsSchemaError(
                f"Option {key!r} uses unknown validator kinds: {', '.join(map(str, unknown))}"
            )
        validators = tuple(validators)

    exclude = raw.get("exclude_from_secondary_context", False)
    if not isinstance(exclude, bool):
        raise OptionsSchemaError(f"Option {key!r}: exclude_from_secondary_context must be true or false")

    return OptionEntry(
        key=key,
        default=raw["default"],
        validators=validators,
        exclude_from_secondary_context=exclude,
    )


def build_options_config(raw: dict, known_kinds: Optional[Iterable[str]] = None) -> OptionsConfig:
    """
    Build an OptionsConfig from a parsed config document:

        settings:
          backend_key: seo_site_options
        options:
          website_name: {default: "", validators: [empty_string, string]}
    """
    known_kinds = set(VALIDATORS if known_kinds is None else known_kinds)
    raw = raw or {}

    settings    = raw.get("settings") or {}
    if not isinstance(settings, dict):
        raise OptionsSchemaError("settings must be a mapping")
    backend_key = settings.get("backend_key")
    if not backend_key:
        raise OptionsSchemaError("settings.backend_key is required")

    raw_options = raw.get("options") or {}
    if not isinstance(raw_options, dict):
        raise OptionsSchemaError("options must be a mapping of option name to entry")

    options = {
        str(key): _parse_entry(str(key), entry, known_kinds)
        for key, entry in raw_options.items()
    }
    logger.debug("Built schema for %s with %d options", backend_key, len(options))

    return OptionsConfig(
        backend_key=backend_key,
        options=options,
        secondary_backend_key=settings.get("secondary_backend_key"),
    )
