import logging

from .errors import EmptyHierarchy
from .geometry import ADDRESS_MASK
from .report import HierarchyStats

logger = logging.getLogger(__name__)


class Hierarchy:

    def __init__(self, caches):
        """Ordered list of caches, probed first to last on every line access.

        Parameters
        ----------

        caches (list of Cache):
            Caches in lookup order, e.g. [L1, L2, L3]. A line missing in all
            of them is counted as a main memory access (DRAM is not simulated).

        Accesses are split into lines using the first cache's line size and
        the same line addresses are handed to every level, so all levels are
        expected to share one line size.
        """
        self.caches = list(caches)
        if not self.caches:
            raise EmptyHierarchy("a cache hierarchy needs at least one cache")
        self.lineSize = self.caches[0].lineSize
        for cache in self.caches[1:]:
            if cache.lineSize != self.lineSize:
                logger.warning("%s has %d byte lines but accesses are split into %d byte lines of %s",
                               cache.name, cache.lineSize, self.lineSize, self.caches[0].name)

        self.timer = 0
        self.events = 0
        self.lineAccesses = 0
        self.mainMemoryAccesses = 0

    def __iter__(self):
        return iter(self.caches)

    def lines(self, address, size):
        """Line aligned addresses touched by size bytes starting at address."""
        lineSize = self.lineSize
        start = address // lineSize
        end = (address + max(size, 1) - 1) // lineSize
        # Lines past the top of the 64 bit address space wrap around to 0
        return [(line * lineSize) & ADDRESS_MASK for line in range(start, end + 1)]

    def accessLine(self, address, count=True):
        """Probe the caches in order until one hits. Returns the hitting cache or None."""
        for cache in self.caches:
            if cache.access(address, self.timer, count):
                return cache
        if count:
            self.mainMemoryAccesses += 1
        return None

    def access(self, address, size, count=True):
        """Simulate one memory access event.

        Parameters
        ----------
        address (int):
            First byte accessed.
        size (int):
            Number of bytes accessed, the access may straddle line boundaries.
        count (bool):
            Whether hits, misses and main memory accesses should be counted
            (default is True). The caches and the timer are updated either way.
        """
        self.timer += 1
        if count:
            self.events += 1
        for line in self.lines(address, size):
            if count:
                self.lineAccesses += 1
            self.accessLine(line, count)

    def run(self, trace, warmup=0):
        """Feed every access of an iterable trace, the first warmup ones uncounted."""
        for i, event in enumerate(trace):
            self.access(event.address, event.size, i >= warmup)
        return self

    def stats(self):
        return HierarchyStats.fromHierarchy(self)
