"""
Permission registry for TaskHub.

Permission codes are plain integers configured as ``name:code`` pairs, e.g.
``user_management:1,task_management:2,role_management:3``. The registry is
built once when this module is imported and is read-only afterwards.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Optional

import structlog

from taskhub.core.exceptions import ConfigError
from taskhub.core.simple_config import settings

logger = structlog.get_logger()

ROLE_MANAGEMENT = "role_management"
USER_MANAGEMENT = "user_management"
TASK_MANAGEMENT = "task_management"

GATE_PERMISSIONS: tuple[str, ...] = (
    ROLE_MANAGEMENT,
    USER_MANAGEMENT,
    TASK_MANAGEMENT,
)


class PermissionRegistry:
    def __init__(self, codes: Mapping[str, int]) -> None:
        self._codes = MappingProxyType(dict(codes))
        self._values = frozenset(self._codes.values())

    @classmethod
    def from_config(cls, raw: str, required: Iterable[str] = GATE_PERMISSIONS) -> "PermissionRegistry":
        """
        Parse a ``name:code,name:code`` string.

        Raises:
            ConfigError: on a malformed item, a duplicate name, or when a
                required permission name is missing.
        """
        codes: dict[str, int] = {}
        for item in (raw or "").split(","):
            item = item.strip()
            if not item:
                continue

            name, sep, value = item.partition(":")
            name = name.strip()
            value = value.strip()
            if not sep or not name or not value:
                raise ConfigError(f"Malformed permission entry {item!r}, expected name:code")
            try:
                code = int(value)
            except ValueError:
                raise ConfigError(f"Permission {name!r} has a non-integer code {value!r}") from None
            if name in codes:
                raise ConfigError(f"Permission {name!r} is defined more than once")
            codes[name] = code

        missing = [name for name in required if name not in codes]
        if missing:
            raise ConfigError(f"Missing required permissions: {missing}")

        return cls(codes)

    def code_for(self, name: str) -> Optional[int]:
        return self._codes.get(name)

    def is_valid_set(self, codes: Iterable[int]) -> bool:
        return all(
            isinstance(code, int) and not isinstance(code, bool) and code in self._values
            for code in codes
        )

    def all_codes(self) -> list[int]:
        return sorted(self._values)

    def as_dict(self) -> dict[str, int]:
        return dict(self._codes)

    def __contains__(self, name: object) -> bool:
        return name in self._codes

    def __len__(self) -> int:
        return len(self._codes)


permission_registry = PermissionRegistry.from_config(settings.PERMISSIONS)
logger.debug("Permission registry loaded", permissions=permission_registry.as_dict())
