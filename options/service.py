"""
Options service: cached, validated access to one option namespace.

The whole namespace is stored as a single mapping under `backend_key`. Values
are loaded lazily on first read and back-filled with schema defaults. Every
successful write persists the full cached mapping, so two service instances
writing the same namespace are last-write-wins.
"""

import copy
import logging
from typing import Any, Iterable, Optional

from options.exceptions import (
    MissingValidatorConfigurationError,
    UnknownOptionError,
    ValidationError,
)
from options.schema import OptionEntry, OptionsConfig

logger = logging.getLogger(__name__)

# Marks a memoized mapping that has not been computed yet
_UNLOADED = object()


def strictly_equal(a: Any, b: Any) -> bool:
    """Strict equality: 1, True and "1" are all different values, at any depth."""
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(strictly_equal(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(strictly_equal(x, y) for x, y in zip(a, b))
    return a == b


class OptionsService:
    def __init__(self, config: OptionsConfig, backend, validator, backend_key: Optional[str] = None):
        """
        `backend` needs read(name) -> dict | None and write(name, mapping).
        `validator` needs check(value, kinds) -> ValidationResult.
        """
        self.config      = config
        self.backend     = backend
        self.validator   = validator
        self.backend_key = backend_key or config.backend_key

        self._schema   = _UNLOADED
        self._defaults = _UNLOADED
        self._values   = _UNLOADED

    # ── Dynamic access ────────────────────────────────────────────────────────

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __contains__(self, key: object) -> bool:
        return key in self.get_schema()

    # ── Values ────────────────────────────────────────────────────────────────

    def get(self, key: str) -> Any:
        if key not in self.get_schema():
            raise UnknownOptionError(key)
        return copy.deepcopy(self._get_values()[key])

    def set(self, key: str, value: Any) -> None:
        """
        Validate and persist a single option.

        The schema default is always accepted without validation. A value equal
        to the current one is a no-op. Anything else must pass one of the
        entry's validator kinds and the normalized value is what gets stored.
        Nothing is cached or written when validation fails.
        """
        schema = self.get_schema()
        if key not in schema:
            raise UnknownOptionError(key)
        entry: OptionEntry = schema[key]

        # Presuming the default is safe
        if strictly_equal(value, entry.default):
            self._store(key, value)
            return

        if strictly_equal(value, self._get_values()[key]):
            logger.debug("Option %s unchanged, skipping write", key)
            return

        if entry.validators is None:
            raise MissingValidatorConfigurationError(key, "validators")

        result = self.validator.check(value, entry.validators)
        if not result.ok:
            raise ValidationError(value, entry.validators, reasons=result.reasons, key=key)

        self._store(key, result.value)

    def get_many(self, keys: Optional[Iterable[str]] = None) -> dict:
        """
        Return all cached values, or only those whose key is in `keys`.

        Unknown keys in the filter are simply absent from the result. Without a
        filter, keys persisted by an older schema are returned as well.
        """
        values = self._get_values()
        keys = list(keys or [])
        if not keys:
            return copy.deepcopy(values)
        wanted = set(keys)
        return {k: copy.deepcopy(v) for k, v in values.items() if k in wanted}

    def ensure_initialized(self) -> bool:
        """Persist the default-filled values if the namespace has no row yet."""
        if self.backend.read(self.backend_key):
            return False
        self.backend.write(self.backend_key, self.get_many())
        logger.info("Initialised option row %s", self.backend_key)
        return True

    def reset_to_defaults(self) -> None:
        """
        Overwrite the stored namespace with the schema defaults.

        The in-process cache is left alone; call clear_cache() afterwards if
        this instance should see the reset.
        """
        self.backend.write(self.backend_key, self.get_defaults())
        logger.info("Reset option row %s to defaults", self.backend_key)

    # ── Schema & defaults ─────────────────────────────────────────────────────

    def get_defaults(self) -> dict:
        if self._defaults is _UNLOADED:
            self._defaults = {key: entry.default for key, entry in self.get_schema().items()}
        return copy.deepcopy(self._defaults)

    def get_default(self, key: str) -> Any:
        defaults = self.get_defaults()
        if key not in defaults:
            raise UnknownOptionError(key)
        return defaults[key]

    def get_schema(self) -> dict[str, OptionEntry]:
        if self._schema is _UNLOADED:
            self._schema = self._build_schema()
        return dict(self._schema)

    def _build_schema(self) -> dict[str, OptionEntry]:
        """Hook for subclasses that post-process the configured schema."""
        return dict(self.config.options)

    def clear_cache(self) -> None:
        self._schema   = _UNLOADED
        self._defaults = _UNLOADED
        self._values   = _UNLOADED

    # ── Internals ─────────────────────────────────────────────────────────────

    def _get_values(self) -> dict:
        if self._values is _UNLOADED:
            loaded = self.backend.read(self.backend_key)
            # No row yet, or an unusable one
            if not loaded or not isinstance(loaded, dict):
                loaded = {}
            loaded = dict(loaded)

            for key, default_value in self.get_defaults().items():
                if key not in loaded:
                    loaded[key] = default_value

            self._values = loaded
            logger.debug("Loaded %d option values from %s", len(loaded), self.backend_key)
        return self._values

    def _store(self, key: str, value: Any) -> None:
        """Write one value through the cache to the backend, without checks."""
        values = self._get_values()
        if strictly_equal(value, values[key]):
            return

        values[key] = copy.deepcopy(value)
        self.backend.write(self.backend_key, copy.deepcopy(values))
        logger.info("Option %s updated in %s", key, self.backend_key)


class SecondaryContextOptionsService(OptionsService):
    """
    Options for a secondary context (e.g. network-wide settings).

    Entries flagged `exclude_from_secondary_context` are not part of this
    service's schema, so they are unknown here and never defaulted.
    """

    def __init__(self, config: OptionsConfig, backend, validator, backend_key: Optional[str] = None):
        super().__init__(
            config,
            backend,
            validator,
            backend_key=backend_key or config.secondary_backend_key or f"{config.backend_key}_secondary",
        )

    def _build_schema(self) -> dict[str, OptionEntry]:
        return {
            key: entry
            for key, entry in self.config.options.items()
            if not entry.exclude_from_secondary_context
        }
