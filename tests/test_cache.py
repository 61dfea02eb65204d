import pytest

from tracecache.cache import Cache
from tracecache.errors import ConfigError
from tracecache.lookup import LinearScan, TagMap


def test_new_cache_is_empty():
    cache = Cache("L1", 0x8000, 64, "8way", "lru")
    assert len(cache.lines) == 512
    assert all(not line.valid and line.accessCount == 0 for line in cache.lines)
    assert (cache.hits, cache.misses) == (0, 0)
    assert isinstance(cache.lookup, LinearScan)


def test_fully_associative_uses_tag_map():
    assert isinstance(Cache("L2", 4096, 64, "full").lookup, TagMap)


def test_unknown_policy():
    with pytest.raises(ConfigError, match="mru"):
        Cache("L1", 1024, 64, "2way", "mru")


def test_miss_then_hit():
    cache = Cache("L1", 1024, 64, "2way")
    assert cache.access(0x1000, 1) is False
    assert cache.access(0x1004, 2) is True
    assert cache.access(0x103f, 3) is True
    assert cache.access(0x1040, 4) is False
    assert (cache.hits, cache.misses) == (2, 2)


def test_line_metadata():
    cache = Cache("L1", 1024, 64, "2way")
    cache.access(0x1000, 7)
    cache.access(0x1000, 9)
    line = cache.getSet(cache.getIndex(0x1000))[0]
    assert line.valid
    assert line.tag == cache.getTag(0x1000)
    assert line.lastAccess == 9
    assert line.accessCount == 2


def test_repeated_access_to_resident_line_only_hits():
    cache = Cache("L1", 1024, 64, "4way", "lfu")
    cache.access(0x2000, 0, count=False)
    N = 100
    for timer in range(1, N + 1):
        assert cache.access(0x2008, timer)
    assert cache.hits == N
    assert cache.misses == 0


def test_uncounted_access_changes_state_only():
    cache = Cache("L1", 1024, 64, "direct")
    assert cache.access(0, 1, count=False) is False
    assert (cache.hits, cache.misses) == (0, 0)
    assert cache.contains(0)


def test_contains_does_not_touch_state():
    cache = Cache("L1", 128, 64, "full", "lru")
    cache.access(0, 1)
    cache.access(64, 2)
    assert cache.contains(0)
    # contains must not have refreshed line 0, so it is still the LRU victim
    cache.access(128, 3)
    assert not cache.contains(0)
    assert (cache.hits, cache.misses) == (0, 3)


@pytest.mark.parametrize("policy", ["rr", "lru", "lfu"])
def test_tag_map_mirrors_valid_lines(policy):
    cache = Cache("L2", 8 * 16, 16, "full", policy)
    for i, address in enumerate([0, 16, 0, 32, 48, 64, 0, 80, 96, 112, 128, 144, 16, 160, 176, 0, 192]):
        cache.access(address, i)
        expected = {line.tag: way for way, line in enumerate(cache.lines) if line.valid}
        assert cache.lookup.maps[0] == expected
    assert len(cache.lookup) == 8


def test_empty_ways_fill_in_order():
    cache = Cache("L1", 8 * 16, 16, "8way", "lfu")
    for i in range(5):
        cache.access(i * 16, i)
    assert [line.valid for line in cache.lines] == [True] * 5 + [False] * 3
    assert cache.filled == [5]


def test_sets_are_independent():
    cache = Cache("L1", 64, 16, "2way", "lru")
    # set 0: 0, 32, 64 / set 1: 16
    for address in (0, 16, 32, 64):
        cache.access(address, 0)
    assert cache.contains(16)
    assert not cache.contains(0)
    assert cache.contains(32) and cache.contains(64)


def test_high_addresses():
    cache = Cache("L1", 1024, 64, "4way", "lru")
    top = (1 << 64) - 64
    assert cache.access(top, 1) is False
    assert cache.access(top + 63, 2) is True
    assert cache.getTag(top) == (1 << cache.tagBits) - 1
