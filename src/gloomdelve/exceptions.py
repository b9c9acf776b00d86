class GloomdelveError(Exception):
    """Base exception for the Gloomdelve project."""


class ConfigError(GloomdelveError):
    """Raised when settings are invalid or a config file cannot be read."""


class OutOfBoundsError(GloomdelveError, IndexError):
    """Raised when a grid or occupancy lookup falls outside the map.

    Callers are expected to guard with ``Grid.in_bounds`` first, so hitting
    this is a programming error rather than a gameplay condition.
    """
