"""Type checks for JSON payload fields."""

# Signed 64-bit range accepted by the database drivers
INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1


def is_strict_int(value):
    """True for a real int (not bool) that fits a BIGINT column."""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    return INT_MIN <= value <= INT_MAX


def as_text(value):
    """Stripped string for ``value``; None becomes ''. Returns None for non-strings."""
    if value is None:
        return ''
    if not isinstance(value, str):
        return None
    return value.strip()
