from typing import Any


def is_positive_id(value: Any) -> bool:
    """
    Integer ids handed to services must be ints greater than zero.
    Booleans are rejected even though they subclass int.
    """
    return isinstance(value, int) and not isinstance(value, bool) and value > 0
