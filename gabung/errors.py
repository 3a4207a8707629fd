class GabungError(Exception):
    """Base class for Gabung-specific errors."""


# Caller input
class InvalidArgument(GabungError):
    pass


# Sources (merge inputs and containers)
class SourceNotFound(GabungError):
    pass


class SourceUnreadable(GabungError):
    pass


# Output files/directories
class DestinationWriteError(GabungError):
    pass


# Footer/record consistency
class InvalidContainer(GabungError):
    pass
