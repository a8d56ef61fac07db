"""
In-memory options backend, for tests and throwaway runs.
"""

import copy
from typing import Optional


class MemoryOptionsBackend:
    def __init__(self, rows: Optional[dict] = None):
        self.rows   = copy.deepcopy(rows or {})
        # (name, mapping) for every write, in order
        self.writes: list[tuple[str, dict]] = []

    def read(self, name: str) -> Optional[dict]:
        row = self.rows.get(name)
        return copy.deepcopy(row) if row is not None else None

    def write(self, name: str, mapping: dict) -> None:
        self.rows[name] = copy.deepcopy(mapping)
        self.writes.append((name, copy.deepcopy(mapping)))
