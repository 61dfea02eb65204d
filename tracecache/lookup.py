class LinearScan:
    """Compare the tag against every valid way of the set.

    Used for direct mapped and set associative caches, where a set holds at
    most eight lines.
    """

    def __init__(self, lines, nSets, linesPerSet):
        self.lines = lines
        self.linesPerSet = linesPerSet

    def find(self, setIndex, tag):
        base = setIndex * self.linesPerSet
        for way in range(self.linesPerSet):
            line = self.lines[base + way]
            if line.valid and line.tag == tag:
                return way
        return -1

    def replace(self, setIndex, oldTag, newTag, way):
        pass


class TagMap:
    """Dictionary from tag to way, one per set.

    Used for fully associative caches, whose single set may hold thousands of
    lines. ``replace`` must be called for every install so the map mirrors the
    valid lines exactly; ``oldTag`` is None when an invalid way was filled.
    """

    def __init__(self, lines, nSets, linesPerSet):
        self.maps = [{} for i in range(nSets)]

    def find(self, setIndex, tag):
        return self.maps[setIndex].get(tag, -1)

    def replace(self, setIndex, oldTag, newTag, way):
        tags = self.maps[setIndex]
        if oldTag is not None:
            del tags[oldTag]
        tags[newTag] = way

    def __len__(self):
        return sum(len(tags) for tags in self.maps)
