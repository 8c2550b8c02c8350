"""Parameter name prefix handling."""

from .exceptions import ConfigurationError


def normalize_prefix(prefix: str) -> str:
    """
    Bookend a parameter name prefix with exactly one '/' on each side.

    "Home", "/Home", "Home/" and "//Home//" all become "/Home/".

    Raises:
        ConfigurationError: If the prefix is None or empty once slashes
            and surrounding whitespace are stripped
    """
    if prefix is None:
        raise ConfigurationError("Parameter name prefix is required")

    trimmed = prefix.strip().strip("/")
    if not trimmed:
        raise ConfigurationError(f"Parameter name prefix {prefix!r} is empty after trimming '/'")

    return f"/{trimmed}/"
