"""Exceptions raised by the pool-time engine and its collaborators."""


class PoolTimeError(Exception):
    """Base class for pool-time failures."""


class EmptyInputError(PoolTimeError):
    """No hourly samples were available to score."""


class MalformedSampleError(PoolTimeError, ValueError):
    """A forecast record (or the whole hourly block) is missing required data."""


class LocationNotFoundError(PoolTimeError):
    """Geocoding returned no match for the requested place name."""
