"""Local VIN validation: alphabet, length and the position-9 check digit.

Validation never raises; malformed input simply yields ``False`` and the
caller decides how to message it.
"""

import re

VIN_LENGTH = 17
CHECK_DIGIT_INDEX = 8

# Alphanumerics minus I, O and Q
_VIN_PATTERN = re.compile(r"[0-9A-HJ-NPR-Z]{17}")
_FORBIDDEN = re.compile(r"[IOQ]")

# Position 9 carries weight 0: it is the check digit itself
WEIGHTS: tuple[int, ...] = (8, 7, 6, 5, 4, 3, 2, 10, 0, 9, 8, 7, 6, 5, 4, 3, 2)

TRANSLITERATION: dict[str, int] = {
    "A": 1, "B": 2, "C": 3, "D": 4, "E": 5, "F": 6, "G": 7, "H": 8,
    "J": 1, "K": 2, "L": 3, "M": 4, "N": 5, "P": 7, "R": 9,
    "S": 2, "T": 3, "U": 4, "V": 5, "W": 6, "X": 7, "Y": 8, "Z": 9,
}  # fmt: skip


def normalize_vin(raw: str) -> str:
    """Trim and upper-case user input before validating it."""
    return raw.strip().upper()


def _char_value(char: str) -> int:
    if char.isdigit():
        return int(char)
    return TRANSLITERATION[char]


def check_character(vin: str) -> str:
    """Compute the expected check character for a 17-character VIN.

    Raises KeyError for characters outside the VIN alphabet; callers
    should run :func:`is_valid_vin` first when input is untrusted.
    """
    total = sum(_char_value(c) * w for c, w in zip(vin, WEIGHTS))
    remainder = total % 11
    return "X" if remainder == 10 else str(remainder)


def validate_checksum(vin: str) -> bool:
    """True iff the character at position 9 equals the computed check character."""
    return vin[CHECK_DIGIT_INDEX] == check_character(vin)


def is_valid_vin(vin: str) -> bool:
    """Check length, alphabet and checksum of a VIN."""
    if len(vin) != VIN_LENGTH:
        return False
    if _FORBIDDEN.search(vin):
        return False
    if not _VIN_PATTERN.fullmatch(vin):
        return False
    return validate_checksum(vin)


class VinValidator:
    """Injectable wrapper around the module-level validation functions."""

    def normalize(self, raw: str) -> str:
        return normalize_vin(raw)

    def is_valid(self, vin: str) -> bool:
        return is_valid_vin(vin)

    def validate_checksum(self, vin: str) -> bool:
        return validate_checksum(vin)

    def check_character(self, vin: str) -> str | None:
        """Expected check character, or None when the VIN can't be checksummed."""
        if len(vin) != VIN_LENGTH or not _VIN_PATTERN.fullmatch(vin):
            return None
        return check_character(vin)
