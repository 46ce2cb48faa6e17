"""
Provider setting validation.

Each entry kind has a validator that checks a candidate value and, when it is
acceptable, returns it in the normalised string form the store keeps.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from mediaprovider.core.enums import EntryKind, BOOLEAN_TOKENS
from mediaprovider.core.exceptions import ValidationError
from .entry import ConfigEntry


class ValidationResult:
    """Result of validating one value; ``value`` is the normalised form."""

    def __init__(self, is_valid: bool = True, value: Optional[str] = None,
                 errors: Optional[List[ValidationError]] = None):
        self.is_valid = is_valid
        self.value = value
        self.errors = errors or []

    def add_error(self, error: ValidationError):
        """Add a validation error."""
        self.errors.append(error)
        self.is_valid = False
        self.value = None

    def __bool__(self):
        return self.is_valid


class EntryValidator(ABC):
    """Abstract base class for entry validators."""

    kind: EntryKind

    @abstractmethod
    def validate(self, entry: ConfigEntry, value: Any) -> ValidationResult:
        """Validate a candidate value for ``entry``."""
        pass

    @staticmethod
    def _reject(entry: ConfigEntry, value: Any, message: str) -> ValidationResult:
        result = ValidationResult()
        result.add_error(ValidationError(entry.key, str(value), message))
        return result


class BooleanValidator(EntryValidator):
    kind = EntryKind.BOOLEAN

    def validate(self, entry: ConfigEntry, value: Any) -> ValidationResult:
        if isinstance(value, bool):
            return ValidationResult(value=str(value).lower())
        if isinstance(value, str) and value.strip().lower() in BOOLEAN_TOKENS:
            return ValidationResult(value=value.strip().lower())
        return self._reject(entry, value, "expected 'true' or 'false'")


class TextValidator(EntryValidator):
    kind = EntryKind.TEXT

    def validate(self, entry: ConfigEntry, value: Any) -> ValidationResult:
        if value is None:
            return self._reject(entry, value, "text value must not be None")
        text = value if isinstance(value, str) else str(value)
        try:
            text.encode("utf-8")
        except UnicodeEncodeError:
            return self._reject(entry, value, "text is not encodable as UTF-8")
        return ValidationResult(value=text)


class SelectValidator(EntryValidator):
    kind = EntryKind.SELECT

    def validate(self, entry: ConfigEntry, value: Any) -> ValidationResult:
        if isinstance(value, str) and value in entry.allowed_values:
            return ValidationResult(value=value)
        return self._reject(entry, value, "not one of the allowed values")


class SelectIndexValidator(EntryValidator):
    """
    Accepts an allowed token or a valid index and normalises to the index.

    ``prefer_index`` flips the lookup order; persisted files hold indices, so
    loading resolves an index first even when a token looks numeric.
    """
    kind = EntryKind.SELECT_INDEX

    def __init__(self, prefer_index: bool = False):
        self.prefer_index = prefer_index

    def validate(self, entry: ConfigEntry, value: Any) -> ValidationResult:
        if isinstance(value, bool):
            return self._reject(entry, value, "expected a token or an index")
        if isinstance(value, int):
            value = str(value)
        if not isinstance(value, str):
            return self._reject(entry, value, "expected a token or an index")

        by_token = entry.index_of(value)
        # "03" and "3" name the same token; store the canonical form
        by_index = str(int(value)) if entry.token_for_index(value) is not None else None
        lookups = (by_index, by_token) if self.prefer_index else (by_token, by_index)

        for index in lookups:
            if index is not None:
                return ValidationResult(value=index)
        return self._reject(entry, value, "neither an allowed token nor a valid index")


_VALIDATORS: Dict[EntryKind, EntryValidator] = {
    EntryKind.BOOLEAN: BooleanValidator(),
    EntryKind.TEXT: TextValidator(),
    EntryKind.SELECT: SelectValidator(),
    EntryKind.SELECT_INDEX: SelectIndexValidator(),
}

_PERSISTED_VALIDATORS: Dict[EntryKind, EntryValidator] = {
    **_VALIDATORS,
    EntryKind.SELECT_INDEX: SelectIndexValidator(prefer_index=True),
}


def validate_entry_value(entry: ConfigEntry, value: Any, persisted: bool = False) -> ValidationResult:
    """Validate ``value`` for ``entry`` with the validator for its kind."""
    validators = _PERSISTED_VALIDATORS if persisted else _VALIDATORS
    return validators[entry.kind].validate(entry, value)
