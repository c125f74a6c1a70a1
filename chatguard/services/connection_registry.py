# chatguard/services/connection_registry.py

from __future__ import annotations

import random
from typing import Dict, Optional

DEFAULT_NAME_PREFIX = "unnamed_user"


class ConnectionRegistry:
    """
    Display names of the live connections, keyed by connection id.

    Every connection gets a random "unnamed_user<n>" name when it connects;
    a join carrying a username overwrites it. Names are not unique and are
    never validated. Missing keys are never an error.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._names: Dict[str, str] = {}

    def _default_name(self) -> str:
        return f"{DEFAULT_NAME_PREFIX}{self._rng.randint(0, 999)}"

    def register(self, connection_id: str) -> None:
        self._names[connection_id] = self._default_name()

    def set_name(self, connection_id: str, name: str) -> None:
        self._names[connection_id] = name

    def name_of(self, connection_id: str) -> str:
        name = self._names.get(connection_id)
        if name is None:
            # Never registered (or already gone); hand out a throwaway default
            return self._default_name()
        return name

    def unregister(self, connection_id: str) -> None:
        self._names.pop(connection_id, None)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._names

    def __len__(self) -> int:
        return len(self._names)
