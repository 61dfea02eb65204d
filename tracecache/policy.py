"""Replacement policies.

Every policy keeps its bookkeeping in flat lists indexed by
``setIndex * linesPerSet + way`` (or by ``setIndex`` for per-set values), so
no structure ever holds a reference to a CacheLine, only small integers.
The cache calls ``touch`` after a hit, ``installed`` after a line has been
written and ``victim`` when a set has no invalid line left.
"""


class Policy:
    name = None

    def __init__(self, lines, nSets, linesPerSet):
        self.lines = lines
        self.nSets = nSets
        self.linesPerSet = linesPerSet

    def touch(self, setIndex, way):
        pass

    def installed(self, setIndex, way):
        pass

    def victim(self, setIndex):
        raise NotImplementedError


class RoundRobin(Policy):
    """Evict ways in order, independently of the access history."""
    name = "rr"

    def __init__(self, lines, nSets, linesPerSet):
        super().__init__(lines, nSets, linesPerSet)
        self.counters = [0] * nSets

    def victim(self, setIndex):
        way = self.counters[setIndex]
        self.counters[setIndex] = (way + 1) % self.linesPerSet
        return way


class LRU(Policy):
    """Least recently used, as a doubly linked recency list per set.

    The links live on the lines themselves (``prev``/``next`` hold ways within
    the set, -1 for none). ``head`` is the most recently used way, ``tail`` the
    least recently used one and therefore the next victim.
    """
    name = "lru"

    def __init__(self, lines, nSets, linesPerSet):
        super().__init__(lines, nSets, linesPerSet)
        self.head = [0] * nSets
        self.tail = [linesPerSet - 1] * nSets
        # Pre-linked in way order so empty ways are filled from 0 upwards.
        for setIndex in range(nSets):
            base = setIndex * linesPerSet
            for way in range(linesPerSet):
                line = lines[base + way]
                line.prev = way - 1
                line.next = way + 1 if way < linesPerSet - 1 else -1

    def moveToHead(self, setIndex, way):
        head = self.head[setIndex]
        if head == way:
            return
        base = setIndex * self.linesPerSet
        line = self.lines[base + way]

        if line.prev != -1:
            self.lines[base + line.prev].next = line.next
        if line.next != -1:
            self.lines[base + line.next].prev = line.prev
        if self.tail[setIndex] == way:
            self.tail[setIndex] = line.prev

        line.prev = -1
        line.next = head
        self.lines[base + head].prev = way
        self.head[setIndex] = way

    def recency(self, setIndex):
        """Ways of a set from most to least recently used."""
        base = setIndex * self.linesPerSet
        order = []
        way = self.head[setIndex]
        while way != -1:
            order.append(way)
            way = self.lines[base + way].next
        return order

    def touch(self, setIndex, way):
        self.moveToHead(setIndex, way)

    def installed(self, setIndex, way):
        self.moveToHead(setIndex, way)

    def victim(self, setIndex):
        return self.tail[setIndex]


class LFU(Policy):
    """Least frequently used, as an indexed binary min-heap per set.

    ``heap[base + pos]`` is the way stored at heap position ``pos`` and
    ``heapPos[base + way]`` is the inverse mapping. Ways are ordered by
    ``accessCount``, equal counts by the lower way. The root is the victim.
    """
    name = "lfu"

    def __init__(self, lines, nSets, linesPerSet):
        super().__init__(lines, nSets, linesPerSet)
        self.heap = list(range(linesPerSet)) * nSets
        self.heapPos = list(range(linesPerSet)) * nSets

    def precedes(self, base, a, b):
        countA = self.lines[base + a].accessCount
        countB = self.lines[base + b].accessCount
        if countA != countB:
            return countA < countB
        return a < b

    def swap(self, base, i, j):
        heap = self.heap
        a = heap[base + i]
        b = heap[base + j]
        heap[base + i] = b
        heap[base + j] = a
        self.heapPos[base + a] = j
        self.heapPos[base + b] = i

    def siftDown(self, setIndex, pos):
        base = setIndex * self.linesPerSet
        size = self.linesPerSet
        heap = self.heap
        while True:
            left = 2 * pos + 1
            right = left + 1
            smallest = pos
            if left < size and self.precedes(base, heap[base + left], heap[base + smallest]):
                smallest = left
            if right < size and self.precedes(base, heap[base + right], heap[base + smallest]):
                smallest = right
            if smallest == pos:
                return
            self.swap(base, pos, smallest)
            pos = smallest

    def touch(self, setIndex, way):
        # accessCount only ever grows, so the way can only move away from the root
        self.siftDown(setIndex, self.heapPos[setIndex * self.linesPerSet + way])

    def installed(self, setIndex, way):
        # The installed way was the minimum (an invalid way or the root victim),
        # so it sits at the root and its new count of 1 only sinks it.
        self.siftDown(setIndex, self.heapPos[setIndex * self.linesPerSet + way])

    def victim(self, setIndex):
        return self.heap[setIndex * self.linesPerSet]


POLICIES = {
    "rr": RoundRobin,
    "round_robin": RoundRobin,
    "lru": LRU,
    "lfu": LFU,
}
