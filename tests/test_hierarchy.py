import logging

import pytest

from tracecache.cache import Cache
from tracecache.errors import EmptyHierarchy
from tracecache.hierarchy import Hierarchy
from tracecache.trace import MemoryAccess


def access(address, size=4):
    return MemoryAccess(0x400000, address, "R", size)


def test_empty_hierarchy():
    with pytest.raises(EmptyHierarchy):
        Hierarchy([])


def test_access_straddling_a_line_boundary():
    hierarchy = Hierarchy([Cache("L1", 256, 16, "direct")])
    assert hierarchy.lines(14, 4) == [0, 16]
    assert hierarchy.lines(12, 4) == [0]
    assert hierarchy.lines(0, 64) == [0, 16, 32, 48]

    hierarchy.access(14, 4)
    L1 = hierarchy.caches[0]
    assert L1.misses == 2
    assert hierarchy.mainMemoryAccesses == 2
    assert hierarchy.events == 1
    assert hierarchy.lineAccesses == 2


def test_access_at_the_top_of_the_address_space_wraps():
    L1 = Cache("L1", 1024, 64, "4way")
    hierarchy = Hierarchy([L1])
    top = (1 << 64) - 64
    assert hierarchy.lines((1 << 64) - 2, 4) == [top, 0]

    hierarchy.access((1 << 64) - 2, 4)
    assert L1.contains(top) and L1.contains(0)
    assert all(line.tag < (1 << L1.tagBits) for line in L1.lines if line.valid)


def test_timer_advances_once_per_event():
    hierarchy = Hierarchy([Cache("L1", 256, 16, "full", "lru")])
    hierarchy.access(14, 4)
    hierarchy.access(100, 1)
    assert hierarchy.timer == 2
    stamps = sorted(line.lastAccess for line in hierarchy.caches[0].lines if line.valid)
    assert stamps == [1, 1, 2]


def test_lower_level_catches_upper_level_misses():
    L1 = Cache("L1", 16, 16, "direct")
    L2 = Cache("L2", 64, 16, "full")
    L2.access(0, 0, count=False)
    L2.access(16, 0, count=False)
    hierarchy = Hierarchy([L1, L2])

    N = 10
    hierarchy.run(access(16 * (i % 2), 1) for i in range(N))
    assert L1.misses == N
    assert L1.hits == 0
    assert L2.hits == N
    assert hierarchy.mainMemoryAccesses == 0


def test_first_hit_stops_the_lookup():
    L1 = Cache("L1", 64, 16, "full")
    L2 = Cache("L2", 256, 16, "full")
    hierarchy = Hierarchy([L1, L2])
    assert hierarchy.accessLine(0) is None
    assert hierarchy.accessLine(0) is L1
    assert (L1.hits, L1.misses) == (1, 1)
    assert (L2.hits, L2.misses) == (0, 1)
    assert hierarchy.mainMemoryAccesses == 1


def test_full_miss_goes_to_main_memory():
    hierarchy = Hierarchy([Cache("L1", 64, 16, "2way"), Cache("L2", 128, 16, "4way")])
    hierarchy.run(access(a * 16) for a in range(20))
    assert hierarchy.mainMemoryAccesses == 20
    assert [c.misses for c in hierarchy] == [20, 20]


def test_warmup_is_not_counted():
    L1 = Cache("L1", 256, 16, "4way", "lru")
    hierarchy = Hierarchy([L1])
    hierarchy.run([access(0), access(16), access(0), access(16)], warmup=2)
    assert (L1.hits, L1.misses) == (2, 0)
    assert hierarchy.mainMemoryAccesses == 0
    assert hierarchy.events == 2
    assert hierarchy.timer == 4


def test_stats_snapshot():
    hierarchy = Hierarchy([Cache("L1", 64, 16, "direct"), Cache("L2", 256, 16, "8way")])
    hierarchy.run([access(0), access(0), access(64)])
    stats = hierarchy.stats()
    assert [(c.name, c.hits, c.misses) for c in stats.caches] == [("L1", 1, 2), ("L2", 0, 2)]
    assert stats.mainMemoryAccesses == 2
    assert stats["L1"].hitRate == pytest.approx(1 / 3)


def test_mixed_line_sizes_warn(caplog):
    with caplog.at_level(logging.WARNING, logger="tracecache.hierarchy"):
        hierarchy = Hierarchy([Cache("L1", 256, 16, "direct"), Cache("L2", 1024, 64, "full")])
    assert hierarchy.lineSize == 16
    assert "L2 has 64 byte lines" in caplog.text
