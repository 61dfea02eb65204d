from collections import namedtuple

from .errors import InvalidGeometry

ADDRESS_BITS = 64
ADDRESS_MASK = (1 << ADDRESS_BITS) - 1

# Lines per set for each kind, None meaning "all of them" (fully associative).
KINDS = {
    "direct": 1,
    "2way": 2,
    "4way": 4,
    "8way": 8,
    "full": None,
}

Geometry = namedtuple("Geometry", "nSets linesPerSet offsetBits indexBits tagBits")


def isPowerOfTwo(n):
    return n > 0 and n & (n - 1) == 0


def log2(n):
    """Number of right shifts until n is exhausted, exact for powers of two."""
    bits = 0
    while n > 1:
        n >>= 1
        bits += 1
    return bits


def calcGeometry(size, lineSize, kind):
    """Derive the set layout and address split of a cache.

    Parameters
    ----------

    size (int):
        Cache size in bytes.
    lineSize (int):
        Number of bytes per cache line, must be a power of two.
    kind (str):
        One of 'direct', '2way', '4way', '8way' or 'full'.

    Returns a Geometry(nSets, linesPerSet, offsetBits, indexBits, tagBits).
    Raises InvalidGeometry for anything the shift/mask split cannot represent.
    """
    if kind not in KINDS:
        raise InvalidGeometry("unknown cache kind %r (expected one of %s)"
                              % (kind, ", ".join(sorted(KINDS))))
    for label, value in (("size", size), ("line size", lineSize)):
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidGeometry("%s must be a positive integer, got %r" % (label, value))
    if not isPowerOfTwo(lineSize):
        raise InvalidGeometry("line size %d is not a power of two" % lineSize)

    ways = KINDS[kind]
    if size % lineSize:
        raise InvalidGeometry("size %d is not a multiple of the line size %d" % (size, lineSize))
    nLines = size // lineSize
    if ways is None:
        nSets = 1
    else:
        if nLines % ways:
            raise InvalidGeometry("size %d is not a multiple of %d lines of %d bytes"
                                  % (size, ways, lineSize))
        nSets = nLines // ways
    if not isPowerOfTwo(nSets):
        raise InvalidGeometry("%s cache of %d bytes with %d byte lines has %d sets, not a power of two"
                              % (kind, size, lineSize, nSets))
    linesPerSet = nLines // nSets

    offsetBits = log2(lineSize)
    indexBits = log2(nSets)
    if offsetBits + indexBits > ADDRESS_BITS:
        raise InvalidGeometry("%d index and offset bits exceed a %d bit address"
                              % (offsetBits + indexBits, ADDRESS_BITS))
    tagBits = ADDRESS_BITS - indexBits - offsetBits
    return Geometry(nSets, linesPerSet, offsetBits, indexBits, tagBits)
