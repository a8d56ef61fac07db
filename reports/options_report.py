"""
Local JSON report of an option namespace.
"""

import json
import logging
import os
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional

from options.service import strictly_equal

logger = logging.getLogger(__name__)

REPORTS_DIR = Path(os.getenv("OPTIONS_REPORTS_DIR", "options_reports"))


def build_options_report(service) -> dict:
    """Snapshot the service's values against its schema defaults."""
    values   = service.get_many()
    defaults = service.get_defaults()

    overridden = sorted(
        key for key, default in defaults.items()
        if key not in values or not strictly_equal(values[key], default)
    )
    stale_keys = sorted(key for key in values if key not in defaults)

    return {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "backend_key":  service.backend_key,
        "values":       values,
        "defaults":     defaults,
        "overridden":   overridden,
        "stale_keys":   stale_keys,
    }


def write_options_report(service, path: Optional[Path] = None) -> Path:
    """
    Write the report to `path`, or to options_reports/<backend_key>-YYYY-MM-DD.json.
    Returns the path of the written file.
    """
    if path is None:
        REPORTS_DIR.mkdir(exist_ok=True)
        path = REPORTS_DIR / f"{service.backend_key}-{date.today().isoformat()}.json"
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = build_options_report(service)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False, default=str)

    logger.info(
        "Options report for %s written to %s (%d overridden, %d stale)",
        service.backend_key, path, len(payload["overridden"]), len(payload["stale_keys"]),
    )
    return path
