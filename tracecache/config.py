"""Load a JSON cache description into Cache objects.

The document looks like::

    {"caches": [
        {"name": "L1", "size": 32768, "line_size": 64, "kind": "8way", "replacement_policy": "lru"},
        {"name": "L2", "size": "1M", "line_size": 64, "kind": "full", "replacement_policy": "lfu"}
    ]}
"""
import json
import logging

from .cache import Cache
from .errors import ConfigError, EmptyHierarchy
from .geometry import KINDS
from .policy import POLICIES

logger = logging.getLogger(__name__)

SUFFIXES = {"K": 1 << 10, "M": 1 << 20, "G": 1 << 30}


def parseSize(value, what):
    """Byte count from an int, a decimal/hex string or a K/M/G suffixed string."""
    if isinstance(value, bool):
        raise ConfigError("%s must be an integer number of bytes, got %r" % (what, value))
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip().upper()
        if text[-2:] in ("KB", "MB", "GB"):
            text = text[:-1]
        scale = 1
        if text[-1:] in SUFFIXES:
            scale = SUFFIXES[text[-1]]
            text = text[:-1]
        try:
            return int(text, 0) * scale
        except ValueError:
            pass
    raise ConfigError("%s must be an integer number of bytes, got %r" % (what, value))


def parseCache(entry, position):
    if not isinstance(entry, dict):
        raise ConfigError("cache #%d must be an object, got %r" % (position, entry))
    if "name" not in entry:
        raise ConfigError("cache #%d: missing 'name'" % position)
    name = entry["name"]
    if not isinstance(name, str):
        raise ConfigError("cache #%d: name must be a string, got %r" % (position, name))

    for key in ("size", "line_size", "kind"):
        if key not in entry:
            raise ConfigError("%s: missing %r" % (name, key))
    size = parseSize(entry["size"], "%s: size" % name)
    lineSize = parseSize(entry["line_size"], "%s: line_size" % name)

    kind = entry["kind"]
    if kind not in KINDS:
        raise ConfigError("%s: unknown kind %r (expected one of %s)"
                          % (name, kind, ", ".join(sorted(KINDS))))
    policy = entry.get("replacement_policy")
    if policy is not None and policy not in POLICIES:
        raise ConfigError("%s: unknown replacement_policy %r (expected one of %s)"
                          % (name, policy, ", ".join(sorted(POLICIES))))

    try:
        cache = Cache(name, size, lineSize, kind, policy)
    except ConfigError as e:
        raise type(e)("%s: %s" % (name, e)) from e

    logger.debug("Found cache %s (size: %d, %s, %s): %d sets, %d lines per set, "
                 "%d offset bits, %d index bits, %d tag bits",
                 cache.name, cache.size, cache.kind, cache.policyName, cache.nSets,
                 cache.linesPerSet, cache.offsetBits, cache.indexBits, cache.tagBits)
    return cache


def parseConfig(document):
    """Caches described by an already decoded configuration document."""
    if not isinstance(document, dict) or not isinstance(document.get("caches"), list):
        raise ConfigError("invalid config: missing 'caches' array")
    if not document["caches"]:
        raise EmptyHierarchy("invalid config: 'caches' is empty")
    caches = [parseCache(entry, i) for i, entry in enumerate(document["caches"])]
    names = [c.name for c in caches]
    for name in names:
        if names.count(name) > 1:
            raise ConfigError("duplicate cache name %r" % name)
    return caches


def loadConfig(path):
    """Read the cache hierarchy from a configuration file.

    Parameters
    ----------

    path (str):
        JSON file with a 'caches' array, in lookup order.
    """
    with open(path, "r") as f:
        try:
            document = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError("%s: JSON parse error: %s" % (path, e)) from e
    return parseConfig(document)
