class CacheSimError(Exception):
    """Base class for every error raised by tracecache."""


class ConfigError(CacheSimError):
    """The cache description could not be turned into caches."""


class InvalidGeometry(ConfigError):
    """Size, line size and kind do not describe a power-of-two cache."""


class EmptyHierarchy(ConfigError):
    """A hierarchy was requested without any cache in it."""


class MalformedTraceEvent(CacheSimError, ValueError):

    def __init__(self, message, lineno=None, line=None):
        self.lineno = lineno
        self.line = line
        if lineno is not None:
            message = "line %d: %s" % (lineno, message)
        super().__init__(message)
