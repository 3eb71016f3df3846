"""Error kinds reported by the k-space engine and its worker channel."""


class KSpaceError(Exception):
    """Base class for engine failures reported to the host."""

    kind = "KSpaceError"


class InvalidDimensions(KSpaceError, ValueError):
    """Sample grid or spectrum with a non-positive size."""

    kind = "InvalidDimensions"


class NoSpectrumLoaded(KSpaceError, RuntimeError):
    """Reconstruction requested before any spectrum was loaded."""

    kind = "NoSpectrumLoaded"


class ChannelFailure(KSpaceError, RuntimeError):
    """The compute-thread message channel is unavailable or closed."""

    kind = "ChannelFailure"
