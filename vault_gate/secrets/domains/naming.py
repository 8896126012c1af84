"""Output and environment variable name normalization."""
import re

_INVALID_CHARS = re.compile(r"[^\w]", re.UNICODE)


def normalize_output_key(key: str, upper_case: bool = False) -> str:
    """
    Turn a secret key into a valid output or environment variable name.

    The first '.' becomes '__', hyphens are dropped and any other character
    that is not a letter, digit or underscore is removed.
    """
    output_key = key.replace(".", "__", 1).replace("-", "")
    output_key = _INVALID_CHARS.sub("", output_key)
    if upper_case:
        output_key = output_key.upper()
    return output_key
