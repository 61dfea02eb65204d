#! /usr/bin/env python
import argparse
import itertools
import logging
import sys

from .config import loadConfig
from .errors import CacheSimError
from .hierarchy import Hierarchy
from .report import formatJson, formatText, saveReport
from .trace import openTrace, readTrace

logger = logging.getLogger("tracecache")


def buildParser():
    parser = argparse.ArgumentParser(prog="tracecache",
                                     description="Trace driven cache hierarchy simulator")
    parser.add_argument("config", help="JSON cache description ({'caches': [...]})")
    parser.add_argument("trace", help="Trace file, '-' for standard input")
    parser.add_argument("nLines", type=int, nargs="?", default=-1,
                        help="Number of counted trace records, -1 for all (default: -1)")
    parser.add_argument("skip", type=int, nargs="?", default=0,
                        help="Trace records ignored before simulating (default: 0)")
    parser.add_argument("warmup", type=int, nargs="?", default=0,
                        help="Trace records simulated without counting (default: 0)")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("-o", "--output", help="Also write the JSON report to this file")
    parser.add_argument("--strict", action="store_true",
                        help="Stop on malformed trace records instead of skipping them")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Debug output")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only report errors")
    return parser


def simulate(caches, trace, nLines=-1, skip=0, warmup=0):
    """Run a trace through a fresh hierarchy built from caches and return it.

    Parameters
    ----------

    caches (list of Cache):
        Caches in lookup order.
    trace (iterable of MemoryAccess):
        Accesses in program order.
    nLines (int):
        Maximum number of counted accesses, -1 for the whole trace.
    skip (int):
        Number of accesses dropped from the start of the trace.
    warmup (int):
        Number of accesses after skip that update the caches but are not counted.
    """
    if min(skip, warmup) < 0:
        raise ValueError("skip and warmup must not be negative")
    stop = None if nLines < 0 else skip + warmup + nLines
    hierarchy = Hierarchy(caches)
    hierarchy.run(itertools.islice(trace, skip, stop), warmup)
    return hierarchy


def main(argv=None):
    parser = buildParser()
    args = parser.parse_args(argv)
    if args.skip < 0 or args.warmup < 0:
        parser.error("skip and warmup must not be negative")
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        caches = loadConfig(args.config)
        trace = openTrace(args.trace)
        try:
            logger.info("Simulating %s through %s", args.trace,
                        ", ".join(c.name for c in caches))
            hierarchy = simulate(caches, readTrace(trace, args.strict),
                                 args.nLines, args.skip, args.warmup)
        finally:
            if args.trace != "-":
                trace.close()
        stats = hierarchy.stats()
        if args.output:
            saveReport(stats, args.output)
            logger.info("Report saved to %s", args.output)
    except (CacheSimError, OSError) as e:
        logger.error("%s", e)
        return 1

    print(formatJson(stats) if args.json else formatText(stats))
    return 0


if __name__ == "__main__":
    sys.exit(main())
