"""Text memory traces, one access per line::

    <pc> <address> <op> <size>

pc and address are hexadecimal (the 0x prefix is optional), op is a single
character such as R or W, size is the decimal number of bytes accessed.
Blank lines and lines starting with '#' are ignored.
"""
import io
import logging
import sys
from collections import namedtuple

from .errors import MalformedTraceEvent
from .geometry import ADDRESS_MASK

logger = logging.getLogger(__name__)

MemoryAccess = namedtuple("MemoryAccess", "pc address op size")


def parseHex(text):
    if text[:2].lower() == "0x":
        text = text[2:]
    return int(text, 16)


def parseLine(line, lineno=None):
    fields = line.split()
    if len(fields) != 4:
        raise MalformedTraceEvent("expected 4 fields (pc address op size), got %d" % len(fields),
                                  lineno, line)
    pc, address, op, size = fields
    try:
        pc = parseHex(pc)
        address = parseHex(address)
    except ValueError:
        raise MalformedTraceEvent("pc and address must be hexadecimal", lineno, line) from None
    try:
        size = int(size, 10)
    except ValueError:
        raise MalformedTraceEvent("size must be a decimal integer", lineno, line) from None
    if len(op) != 1:
        raise MalformedTraceEvent("op must be a single character, got %r" % op, lineno, line)
    if size <= 0:
        raise MalformedTraceEvent("size must be positive, got %d" % size, lineno, line)
    if not 0 <= address <= ADDRESS_MASK or not 0 <= pc <= ADDRESS_MASK:
        raise MalformedTraceEvent("address does not fit in 64 bits", lineno, line)
    return MemoryAccess(pc, address, op, size)


def readTrace(lines, strict=False):
    """Generate MemoryAccess records from an iterable of text lines.

    Malformed lines are logged and skipped, or raised if strict is True.
    """
    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        try:
            yield parseLine(line, lineno)
        except MalformedTraceEvent as e:
            if strict:
                raise
            logger.warning("Invalid trace record, skipped: %s", e)


def openTrace(path):
    """Open a trace file for reading, '-' meaning standard input.

    Undecodable bytes become U+FFFD so that only the affected record is malformed.
    """
    if path == "-":
        return io.TextIOWrapper(sys.stdin.buffer, errors="replace")
    return open(path, "r", errors="replace")
