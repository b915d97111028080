"""
Checks for scalar argument values, run by resolvers before any write
"""
import re


EMAIL_PATTERN = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$"
)


def is_email(value):
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def is_empty(value):
    return value is None or (isinstance(value, str) and not value.strip())


def is_length(value, min=0, max=None):
    if not isinstance(value, str):
        return False
    if len(value) < min:
        return False
    return max is None or len(value) <= max
