import re
from typing import Any, Iterable

# Status codes that can be turned into "http-exception:<code>" suppression rules.
HTTP_STATUS_CODE_RE = re.compile(r"^[1-5][0-9]{2}$")


def to_uppercase(value: str | None) -> str | None:
    """
    Converts a string to uppercase if it's not None.
    """
    if value is None:
        return None
    return value.upper()

def to_lowercase(value: str | None) -> str | None:
    """
    Converts a string to lowercase if it's not None.
    """
    if value is None:
        return None
    return value.lower()

def to_lowercase_list(value: Any) -> Any:
    """
    Lowercases every string of a list; a comma separated string is split first.
    Anything else is returned untouched so pydantic can report it.
    """
    if isinstance(value, str):
        value = [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple, set, frozenset)):
        return [item.lower() if isinstance(item, str) else item for item in value]
    return value

def is_http_status_code(value: Any) -> bool:
    """
    True when `value` (int or str) reads as a 1xx-5xx status code.
    """
    if isinstance(value, bool):
        return False
    return HTTP_STATUS_CODE_RE.match(str(value)) is not None

def valid_status_codes(values: Iterable[Any]) -> list[int]:
    """
    Keep the values that are valid HTTP status codes, in order, as ints.
    Invalid entries are dropped without error.
    """
    return [int(value) for value in values if is_http_status_code(value)]
