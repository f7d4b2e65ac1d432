"""
Validation results and the field checks shared by request classes.

A ValidationResult collects errors (which make a request invalid) and
warnings (which never do) in the order they were found.
"""

import re
from typing import Any, Dict, Iterable, List, Optional


HASH_LENGTH = 40
HASH_PATTERN = re.compile(r'^[a-fA-F0-9]+$')


class ValidationResult:
    def __init__(self, errors: Optional[Iterable[str]] = None, warnings: Optional[Iterable[str]] = None):
        self._errors: List[str] = list(errors or [])
        self._warnings: List[str] = list(warnings or [])

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def failure(cls, errors: Iterable[str], warnings: Optional[Iterable[str]] = None) -> "ValidationResult":
        return cls(errors, warnings)

    def add_error(self, message: str) -> "ValidationResult":
        self._errors.append(message)
        return self

    def add_warning(self, message: str) -> "ValidationResult":
        self._warnings.append(message)
        return self

    def is_valid(self) -> bool:
        return not self._errors

    def has_warnings(self) -> bool:
        return bool(self._warnings)

    def get_errors(self) -> List[str]:
        return list(self._errors)

    def get_warnings(self) -> List[str]:
        return list(self._warnings)

    def get_first_error(self) -> Optional[str]:
        return self._errors[0] if self._errors else None

    def get_first_warning(self) -> Optional[str]:
        return self._warnings[0] if self._warnings else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.is_valid(),
            "errors": self.get_errors(),
            "warnings": self.get_warnings(),
        }

    def __bool__(self) -> bool:
        return self.is_valid()

    def __repr__(self) -> str:
        return f"ValidationResult(errors={self._errors!r}, warnings={self._warnings!r})"


# -------------------------------------------------------------------------
# Field checks
# -------------------------------------------------------------------------

def check_hash(result: ValidationResult, value: Any, field: str = "hash") -> bool:
    """
    Check a torrent info hash, adding at most one error.

    Rules are applied in order and the first failure wins: non-empty,
    exactly 40 characters, hexadecimal characters only.

    Returns:
        bool: True if the hash passed every rule.
    """
    if not isinstance(value, str) or not value:
        result.add_error(f"{field} cannot be empty")
        return False
    if len(value) != HASH_LENGTH:
        result.add_error(f"{field} must be {HASH_LENGTH} characters long, got {len(value)}")
        return False
    if not HASH_PATTERN.match(value):
        result.add_error(f"{field} must contain only hexadecimal characters")
        return False
    return True


def check_hash_list(result: ValidationResult, hashes: Iterable[Any], max_count: int, field: str = "hashes") -> None:
    hashes = list(hashes)
    if len(hashes) > max_count:
        result.add_error(f"Too many {field}: {len(hashes)} given, maximum is {max_count}")
    for index, value in enumerate(hashes):
        check_hash(result, value, f"{field}[{index}]")


def check_range(result: ValidationResult, value: Optional[float], field: str,
                minimum: Optional[float] = None, maximum: Optional[float] = None) -> None:
    if value is None:
        return
    if minimum is not None and value < minimum:
        result.add_error(f"{field} must be at least {minimum}, got {value}")
    elif maximum is not None and value > maximum:
        result.add_error(f"{field} must be at most {maximum}, got {value}")


def check_name(result: ValidationResult, value: Optional[str], field: str,
               max_length: int, forbidden: str = "") -> None:
    """Check a free-text field such as a category, tag or path."""
    if value is None:
        return
    if not value.strip():
        result.add_error(f"{field} cannot be blank")
        return
    if len(value) > max_length:
        result.add_error(f"{field} cannot exceed {max_length} characters")
    bad = sorted({char for char in value if char in forbidden})
    if bad:
        result.add_error(f"{field} contains invalid characters: {' '.join(bad)}")
