import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from tracecache.plot import main, perThousand, plotReports  # noqa: E402
from tracecache.report import CacheStats, HierarchyStats, saveReport  # noqa: E402


def report(l1Hits, mem):
    return HierarchyStats([CacheStats("L1", l1Hits, 100 - l1Hits), CacheStats("L2", 0, 100 - l1Hits)],
                          mainMemoryAccesses=mem, events=80, lineAccesses=100)


def test_per_thousand():
    assert list(perThousand([5, 0], [10, 0])) == [500.0, 0.0]


def test_plot_reports():
    fig = plotReports([report(60, 40), report(80, 20)], ["lru", "lfu"])
    assert len(fig.axes) == 3
    assert [t.get_text() for t in fig.axes[-1].get_xticklabels()] == ["lru", "lfu"]


def test_reports_must_match():
    other = HierarchyStats([CacheStats("L1")], lineAccesses=1)
    with pytest.raises(ValueError, match="different hierarchies"):
        plotReports([report(60, 40), other], ["a", "b"])


def test_main_saves_figure(tmp_path):
    paths = []
    for name, stats in (("lru", report(60, 40)), ("lfu", report(80, 20))):
        path = str(tmp_path / (name + ".json"))
        saveReport(stats, path)
        paths.append(path)
    out = tmp_path / "chart.png"
    assert main(paths + ["--out", str(out)]) == 0
    assert out.stat().st_size > 0
