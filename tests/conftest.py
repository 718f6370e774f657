"""
Pytest configuration for the k-NN hold-out tests.

Forces a non-interactive matplotlib backend and provides small record sets.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from knn_holdout import Record


@pytest.fixture
def example_records():
    """The five-point example: two tight clusters plus one outlier."""
    return [
        Record(0, 0, 1),
        Record(0, 1, 1),
        Record(5, 5, 2),
        Record(5, 6, 2),
        Record(10, 10, 1),
    ]


@pytest.fixture
def three_clusters():
    """Thirty well separated points, ten per class 1/2/3."""
    records = []
    for label, (cx, cy) in ((1, (0.0, 0.0)), (2, (20.0, 0.0)), (3, (0.0, 20.0))):
        for i in range(10):
            records.append(Record(cx + (i % 5) * 0.3, cy + (i // 5) * 0.3, label))
    return records


@pytest.fixture
def data_file(tmp_path, three_clusters):
    """The three clusters written in 'x1 x2 label' text format."""
    path = tmp_path / "base1.txt"
    path.write_text(
        "".join(f"{r.x1} {r.x2} {r.label}\n" for r in three_clusters)
    )
    return path
