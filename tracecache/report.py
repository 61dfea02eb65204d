import json


class CacheStats:

    def __init__(self, name, hits=0, misses=0):
        self.name = name
        self.hits = hits
        self.misses = misses

    @property
    def accesses(self):
        return self.hits + self.misses

    @property
    def hitRate(self):
        return self.hits / self.accesses if self.accesses else 0.0

    def toDict(self):
        return {
            "name": self.name,
            "hits": self.hits,
            "misses": self.misses,
            "accesses": self.accesses,
            "hit_rate": self.hitRate,
        }


class HierarchyStats:
    """Snapshot of the counters of a simulated hierarchy."""

    def __init__(self, caches, mainMemoryAccesses=0, events=0, lineAccesses=0):
        self.caches = list(caches)
        self.mainMemoryAccesses = mainMemoryAccesses
        self.events = events
        self.lineAccesses = lineAccesses

    @classmethod
    def fromHierarchy(cls, hierarchy):
        return cls([CacheStats(c.name, c.hits, c.misses) for c in hierarchy.caches],
                   hierarchy.mainMemoryAccesses, hierarchy.events, hierarchy.lineAccesses)

    @classmethod
    def fromDict(cls, data):
        return cls([CacheStats(c["name"], c["hits"], c["misses"]) for c in data["caches"]],
                   data.get("main_memory_accesses", 0), data.get("events", 0),
                   data.get("line_accesses", 0))

    def __getitem__(self, name):
        for cache in self.caches:
            if cache.name == name:
                return cache
        raise KeyError(name)

    def toDict(self):
        return {
            "caches": [c.toDict() for c in self.caches],
            "main_memory_accesses": self.mainMemoryAccesses,
            "events": self.events,
            "line_accesses": self.lineAccesses,
        }


def formatText(stats):
    out = []
    for cache in stats.caches:
        out.append("[%s]" % cache.name)
        out.append("  hits:   %d" % cache.hits)
        out.append("  misses: %d" % cache.misses)
    out.append("main memory accesses: %d" % stats.mainMemoryAccesses)
    if stats.lineAccesses:
        out.append("")
        out.append("events: %d, line accesses: %d" % (stats.events, stats.lineAccesses))
        for cache in stats.caches:
            out.append("%s hit:  %d (%0.3f)" % (cache.name, cache.hits, cache.hitRate * 100))
        out.append("Mem:    %d (%0.3f)" % (stats.mainMemoryAccesses,
                                           stats.mainMemoryAccesses / stats.lineAccesses * 100))
    return "\n".join(out)


def formatJson(stats):
    return json.dumps(stats.toDict(), indent=2)


def loadReport(path):
    with open(path, "r") as f:
        return HierarchyStats.fromDict(json.load(f))


def saveReport(stats, path):
    with open(path, "w") as f:
        f.write(formatJson(stats))
        f.write("\n")
    return path
