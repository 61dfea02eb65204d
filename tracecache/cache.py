from .errors import ConfigError
from .geometry import calcGeometry
from .lookup import LinearScan, TagMap
from .policy import POLICIES


class CacheLine:
    __slots__ = ("tag", "valid", "lastAccess", "accessCount", "prev", "next")

    def __init__(self):
        self.tag = 0
        self.valid = False
        self.lastAccess = 0
        self.accessCount = 0
        # Recency links within the set, only maintained by the LRU policy
        self.prev = -1
        self.next = -1

    def __repr__(self):
        if not self.valid:
            return "CacheLine(invalid)"
        return "CacheLine(tag=%#x, lastAccess=%d, accessCount=%d)" % (
            self.tag, self.lastAccess, self.accessCount)


class Cache:

    def __init__(self, name="cache", size=0x8000, lineSize=64, kind="8way", policy=None):
        """Simple associative cache.

        Parameters
        ----------

        name (str):
            Label used in reports.
        size (int):
            Cache size in bytes. (Default 0x8000 (32 kB))
        lineSize (int):
            Number of bytes per cache line, determines the number of offset bits.
        kind (str):
            'direct', '2way', '4way', '8way' or 'full' (fully associative).
        policy (str):
            Replacement policy, 'lru', 'lfu' or 'rr'. None means round robin.
        """
        self.name = name
        self.size = size
        self.lineSize = lineSize
        self.kind = kind
        self.policyName = policy or "rr"
        if self.policyName not in POLICIES:
            raise ConfigError("unknown replacement policy %r (expected one of %s)"
                              % (policy, ", ".join(sorted(POLICIES))))

        geometry = calcGeometry(size, lineSize, kind)
        self.nSets = geometry.nSets
        self.linesPerSet = geometry.linesPerSet
        self.offsetBits = geometry.offsetBits
        self.indexBits = geometry.indexBits
        self.tagBits = geometry.tagBits
        self.indexMask = self.nSets - 1

        self.lines = [CacheLine() for i in range(self.nSets * self.linesPerSet)]
        # Lines are never invalidated and empty ways are filled lowest first,
        # so the valid ways of a set are always 0 .. filled[set] - 1.
        self.filled = [0] * self.nSets

        self.policy = POLICIES[self.policyName](self.lines, self.nSets, self.linesPerSet)
        if kind == "full":
            self.lookup = TagMap(self.lines, self.nSets, self.linesPerSet)
        else:
            self.lookup = LinearScan(self.lines, self.nSets, self.linesPerSet)

        self.hits = 0
        self.misses = 0

    def __repr__(self):
        return "Cache(%r, size=%d, lineSize=%d, kind=%r, policy=%r)" % (
            self.name, self.size, self.lineSize, self.kind, self.policyName)

    def getTag(self, address):
        return address >> (self.indexBits + self.offsetBits)

    def getIndex(self, address):
        return (address >> self.offsetBits) & self.indexMask

    def getOffset(self, address):
        return address & (self.lineSize - 1)

    def lineAddress(self, tag, setIndex):
        """Base address of the line identified by a tag and a set index."""
        return (tag << (self.indexBits + self.offsetBits)) | (setIndex << self.offsetBits)

    def getSet(self, setIndex):
        base = setIndex * self.linesPerSet
        return self.lines[base:base + self.linesPerSet]

    def contains(self, address):
        """Whether the line holding address is resident, without touching any state."""
        return self.lookup.find(self.getIndex(address), self.getTag(address)) != -1

    def access(self, address, timer, count=True):
        """Probe for an address, installing its line on a miss.

        Parameters
        ----------
        address (int):
            The address which is accessed.
        timer (int):
            Logical time of the access, stored as the line's last access.
        count (bool):
            Whether hit/miss should be counted (default is True).

        Returns True on a hit, False on a miss.
        """
        setIndex = (address >> self.offsetBits) & self.indexMask
        tag = address >> (self.indexBits + self.offsetBits)
        base = setIndex * self.linesPerSet

        way = self.lookup.find(setIndex, tag)
        if way != -1:
            if count:
                self.hits += 1
            line = self.lines[base + way]
            line.lastAccess = timer
            line.accessCount += 1
            self.policy.touch(setIndex, way)
            return True

        if count:
            self.misses += 1
        way = self.selectWay(setIndex)
        line = self.lines[base + way]
        self.lookup.replace(setIndex, line.tag if line.valid else None, tag, way)
        line.tag = tag
        line.valid = True
        line.lastAccess = timer
        line.accessCount = 1
        self.policy.installed(setIndex, way)
        return False

    def selectWay(self, setIndex):
        """Way to install into: the first invalid way, else the policy's victim."""
        filled = self.filled[setIndex]
        if filled < self.linesPerSet:
            self.filled[setIndex] = filled + 1
            return filled
        return self.policy.victim(setIndex)
