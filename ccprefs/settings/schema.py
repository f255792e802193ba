"""
Preferences schema and validation.

Declares the closed set of persisted preference keys, their types and the one
business rule that lives in the schema (cloudUrl has no trailing slash).
Validation here is pure: it never mutates the candidate, never logs and never
raises; problems are reported through the returned result.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Optional, Tuple


class SettingType(Enum):
    """Value types a preference may hold."""
    STRING = "string"
    BOOL = "bool"


@dataclass(frozen=True)
class SettingDefinition:
    """Definition of a single preference key."""
    setting_type: SettingType
    default: Any = None
    optional: bool = False
    check: Optional[Callable[[Any], Optional[str]]] = None
    description: str = ""

    def validate(self, value: Any) -> Tuple[bool, Optional[str]]:
        """
        Validate a value against this definition.

        Returns:
            (is_valid, error_message)
        """
        if value is None:
            if self.optional:
                return True, None
            return False, f"Expected {self.setting_type.value}, got None"

        if self.setting_type == SettingType.BOOL:
            if not isinstance(value, bool):
                return False, f"Expected bool, got {type(value).__name__}"
        elif self.setting_type == SettingType.STRING:
            if not isinstance(value, str):
                return False, f"Expected string, got {type(value).__name__}"

        if self.check is not None:
            message = self.check(value)
            if message:
                return False, message

        return True, None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a whole preferences map."""
    valid: bool
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(True)

    @classmethod
    def invalid(cls, reason: str) -> "ValidationResult":
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.valid


def _no_trailing_slash(value: str) -> Optional[str]:
    if value.endswith('/'):
        return "must not end with a slash"
    return None


# Persisted keys keep the names used on disk by the host.
PREFERENCES_SCHEMA: Dict[str, SettingDefinition] = {
    'cloudUrl': SettingDefinition(
        SettingType.STRING,
        default=None,
        optional=True,
        check=_no_trailing_slash,
        description="URL of the cloud instance, without a trailing slash",
    ),
    'username': SettingDefinition(
        SettingType.STRING,
        default=None,
        optional=True,
        description="Username used to authenticate with the cloud instance",
    ),
    'savePath': SettingDefinition(
        SettingType.STRING,
        default=None,
        optional=True,
        description="Absolute local path where generated files are saved",
    ),
    'offline': SettingDefinition(
        SettingType.BOOL,
        default=False,
        description=(
            "Request offline (non-expiring) refresh tokens. Less secure than "
            "a normal refresh token"
        ),
    ),
    'addToNew': SettingDefinition(
        SettingType.BOOL,
        default=True,
        description=(
            "Add clusters to workspaces named after their original namespaces "
            "instead of the active workspace"
        ),
    ),
}


def validate_preferences(candidate: Any) -> ValidationResult:
    """Validate a raw preferences map.

    Only recognized keys are checked; unknown keys do not affect validity and
    keys missing from the map are accepted (loading merges, it does not
    replace). The first failing key decides the reason.
    """
    if not isinstance(candidate, Mapping):
        return ValidationResult.invalid(
            f"Expected a mapping of preferences, got {type(candidate).__name__}"
        )

    for key, definition in PREFERENCES_SCHEMA.items():
        if key not in candidate:
            continue
        is_valid, message = definition.validate(candidate[key])
        if not is_valid:
            return ValidationResult.invalid(f"{key}: {message}")

    return ValidationResult.ok()


def get_default_value(key: str) -> Any:
    """Get the static default for a key (None for unknown keys)."""
    definition = PREFERENCES_SCHEMA.get(key)
    return definition.default if definition else None


def get_setting_description(key: str) -> str:
    """Get the human-readable description of a key."""
    definition = PREFERENCES_SCHEMA.get(key)
    return definition.description if definition else ""
