#! /usr/bin/env python3
"""Compare saved reports (tracecache -o report.json) as bar charts.

One row per cache level plus one for main memory, one group of bars per
report, values in accesses per 1000 line accesses.
"""
import argparse
import os
import sys

import matplotlib
import numpy as np
from matplotlib import pyplot as plt
from matplotlib.gridspec import GridSpec

from .report import loadReport


def perThousand(values, lineAccesses):
    lineAccesses = np.asarray(lineAccesses, dtype=float)
    return np.divide(np.asarray(values, dtype=float) * 1000, lineAccesses,
                     out=np.zeros_like(lineAccesses), where=lineAccesses > 0)


def plotReports(reports, labels):
    names = [c.name for c in reports[0].caches]
    for stats in reports[1:]:
        if [c.name for c in stats.caches] != names:
            raise ValueError("reports describe different hierarchies: %s vs %s"
                             % (names, [c.name for c in stats.caches]))

    N = [stats.lineAccesses for stats in reports]
    bar_width = 0.35
    index = np.arange(len(reports))
    gs = GridSpec(len(names) + 1, 1)
    fig = plt.figure(figsize=(max(6, 1.5 * len(reports)), 2.5 * (len(names) + 1)))

    for row, name in enumerate(names):
        hits = [stats[name].hits for stats in reports]
        misses = [stats[name].misses for stats in reports]
        ax = fig.add_subplot(gs[row, 0])
        ax.bar(index, perThousand(hits, N), width=bar_width, color='C0', label='Hits')
        ax.bar(index + bar_width, perThousand(misses, N), width=bar_width, color='C3', label='Misses')
        ax.set_ylabel(name)
        ax.set_xticks(())
        if row == 0:
            ax.legend()

    ax = fig.add_subplot(gs[len(names), 0])
    ax.bar(index + bar_width / 2, perThousand([stats.mainMemoryAccesses for stats in reports], N),
           width=bar_width, color='C7')
    ax.set_ylabel("Main Memory")
    ax.set_xticks(index + bar_width / 2)
    ax.set_xticklabels(labels)
    fig.tight_layout()
    return fig


def main(argv=None):
    parser = argparse.ArgumentParser(prog="tracecache-plot", description=__doc__.splitlines()[0])
    parser.add_argument("reports", nargs="+", help="JSON reports written with -o")
    parser.add_argument("--labels", nargs="+", help="One label per report (default: file names)")
    parser.add_argument("--out", help="Save the figure to this file instead of showing it")
    args = parser.parse_args(argv)

    labels = args.labels or [os.path.splitext(os.path.basename(p))[0] for p in args.reports]
    if len(labels) != len(args.reports):
        parser.error("%d labels for %d reports" % (len(labels), len(args.reports)))
    if args.out:
        matplotlib.use("Agg")

    fig = plotReports([loadReport(p) for p in args.reports], labels)
    if args.out:
        fig.savefig(args.out)
        plt.close(fig)
    else:
        plt.show()
    return 0


if __name__ == "__main__":
    sys.exit(main())
