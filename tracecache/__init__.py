from .cache import Cache, CacheLine
from .config import loadConfig, parseConfig
from .errors import (CacheSimError, ConfigError, EmptyHierarchy, InvalidGeometry,
                     MalformedTraceEvent)
from .geometry import calcGeometry
from .hierarchy import Hierarchy
from .trace import MemoryAccess, readTrace

__version__ = "0.1.0"
