from __future__ import annotations

from typing import Any, Mapping, Protocol


class SettingsRepository(Protocol):
    def get_all(self) -> Mapping[str, Any]:
        """Every stored setting keyed by setting_key, values JSON-decoded."""

        raise NotImplementedError

    def put(self, key: str, value: Any) -> None:
        raise NotImplementedError
