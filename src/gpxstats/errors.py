# gpxstats/errors

"""
gpxstats.errors

Central exception hierarchy for gpxstats.

Rationale:
  - Modules should raise specific, meaningful errors.
  - Callers can catch GPXStatsError (broad) or specific subclasses (narrow).
  - Most classes also derive from the closest builtin, so generic handlers
    (ValueError, LookupError, IndexError, ...) keep working.
"""


class GPXStatsError(RuntimeError):
    """Base class for all gpxstats runtime errors."""


# ---- Construction errors -----------------------

class DocumentError(GPXStatsError, ValueError):
    """A required GPX element, attribute or value is missing or malformed."""

class SourceError(GPXStatsError, OSError):
    """The GPX source could not be opened, read or parsed as XML."""


# ---- Query errors ------------------------------

class QueryError(GPXStatsError):
    """Errors raised by statistic and lookup queries on a built model."""

class EmptySequenceError(QueryError):
    """A statistic was requested from a route or track with no positions."""

class NotFoundError(QueryError, LookupError):
    """No retained position matches the requested name or location."""

class PositionIndexError(QueryError, IndexError):
    """Indexed access outside the retained positions."""

class TimelineError(QueryError, ArithmeticError):
    """Two consecutive retained positions have zero travel time between them."""


# ---- Model errors ------------------------------

class FrozenModelError(GPXStatsError, AttributeError):
    """Attempt to modify a route or track after construction."""


# ---- Tooling errors ----------------------------

class ConfigError(GPXStatsError):
    """Configuration files or overrides could not be interpreted."""

class FzfNotFoundError(GPXStatsError):
    """fzf is required but not available on PATH."""
