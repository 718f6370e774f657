"""
knn_holdout.py
==============
2-D Point Classification — k-NN with a Held-out Test Split
==========================================================

Classifies labeled points in the plane with a k-Nearest-Neighbours vote and
scores the result on a held-out test split.

Input format
------------
Plain text, one point per line, whitespace separated::

    x1 x2 label

``x1`` and ``x2`` are real numbers, ``label`` is an integer class id.
The source may be a local file or an ``http(s)://`` URL (fetched via
`requests`).

Pipeline Stages
---------------
1. load_records(source)                 → list[Record]
2. shuffle_and_split(records, ratio)    → seeded permutation, train / test
3. neighbors(query, train, k)           → k nearest training points
4. classify(neighbors)                  → majority vote, smallest label on ties
5. predict_all(train, test, k)          → write a prediction on every test point
6. evaluate(test)                       → accuracy + misclassified records
7. main()                               → orchestrate all stages end-to-end

Usage
-----
    knn-holdout -i base1.txt -r 0.8 -k 4
    python knn_holdout.py -i base1.txt --report

Requirements
------------
    pip install numpy pandas scikit-learn matplotlib requests
"""

from __future__ import annotations

import argparse
import math
import numbers
import sys
from collections import Counter
from io import StringIO
from pathlib import Path
from typing import NamedTuple, Sequence, Union

import matplotlib
import matplotlib.colors
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import requests
from sklearn.metrics import (
    ConfusionMatrixDisplay,
    accuracy_score,
    classification_report,
    f1_score,
    precision_score,
    recall_score,
)

# ── Global constants ─────────────────────────────────────────────────────────
DATA_FILE:    str = "base1.txt"
PLOT_FILE:    str = "scatter.png"
COLUMN_NAMES: list[str] = ["x1", "x2", "label"]

TRAIN_RATIO:  float = 0.8     # 80 / 20 train-test split
N_NEIGHBORS:  int = 4         # k
RANDOM_STATE: int = 1337      # shuffle seed for reproducibility

PLOT_SIZE_PX: int = 800
PLOT_DPI:     int = 100
REQUEST_TIMEOUT: int = 30     # seconds

# Fixed colours for the classes seen in practice; other labels fall back to tab10
LABEL_COLORS: dict[int, str] = {1: "red", 2: "green", 3: "blue"}


# ════════════════════════════════════════════════════════════════════════════
# Errors
# ════════════════════════════════════════════════════════════════════════════

class KNNError(Exception):
    """Base class for every failure raised by this module."""


class ConfigurationError(KNNError, ValueError):
    """Invalid k or ratio."""


class EmptyTestSetError(KNNError, ValueError):
    """Evaluation was requested on an empty test set."""


class MissingPredictionError(KNNError, RuntimeError):
    """A test record reached evaluation without a prediction."""


class PredictionAlreadySetError(KNNError, RuntimeError):
    """A record's prediction was written twice."""


class MalformedInputError(KNNError, ValueError):
    """The input source is not in ``x1 x2 label`` format."""


# ════════════════════════════════════════════════════════════════════════════
# Data model
# ════════════════════════════════════════════════════════════════════════════

class Record:
    """
    One labeled point in the plane.

    ``features`` and ``label`` are fixed at construction. ``prediction``
    starts unset and may be written exactly once.
    """

    __slots__ = ("_features", "_label", "_prediction")

    def __init__(self, x1: float, x2: float, label: int) -> None:
        for name, value in (("x1", x1), ("x2", x2)):
            if isinstance(value, bool) or not isinstance(value, numbers.Real):
                raise TypeError(f"{name} must be a real number, got {value!r}")
        if isinstance(label, bool) or not isinstance(label, numbers.Integral):
            raise TypeError(f"label must be an integer, got {label!r}")

        self._features: tuple[float, float] = (float(x1), float(x2))
        self._label: int = int(label)
        self._prediction: int | None = None

    @property
    def features(self) -> tuple[float, float]:
        return self._features

    @property
    def x1(self) -> float:
        return self._features[0]

    @property
    def x2(self) -> float:
        return self._features[1]

    @property
    def label(self) -> int:
        return self._label

    @property
    def prediction(self) -> int | None:
        return self._prediction

    @prediction.setter
    def prediction(self, value: int) -> None:
        if self._prediction is not None:
            raise PredictionAlreadySetError(
                f"prediction already set to {self._prediction} for {self!r}"
            )
        if isinstance(value, bool) or not isinstance(value, numbers.Integral):
            raise TypeError(f"prediction must be an integer, got {value!r}")
        self._prediction = int(value)

    @property
    def has_prediction(self) -> bool:
        return self._prediction is not None

    @property
    def is_correct(self) -> bool:
        return self._prediction == self._label

    def __repr__(self) -> str:
        return (
            f"Record(x1={self.x1!r}, x2={self.x2!r}, "
            f"label={self.label!r}, prediction={self.prediction!r})"
        )


class Neighbor(NamedTuple):
    """A training record scored against one query; lives for one search only."""

    query: Record
    candidate: Record
    distance: float


# ════════════════════════════════════════════════════════════════════════════
# Stage 1 — Data Acquisition
# ════════════════════════════════════════════════════════════════════════════

def load_records(source: Union[str, Path]) -> list[Record]:
    """
    Read ``x1 x2 label`` rows from a local file or an http(s) URL.

    Parameters
    ----------
    source : str or Path
        File path, or a URL fetched with `requests` (no authentication).

    Returns
    -------
    list[Record]
        One Record per non-empty line, in file order. An empty source
        yields an empty list.

    Raises
    ------
    MalformedInputError
        Wrong column count, non-numeric features, non-integer labels or
        missing fields.
    requests.HTTPError
        If the remote endpoint returns a non-2xx status code.
    """
    source = str(source)
    if source.startswith(("http://", "https://")):
        print(f"[load_records] Fetching records from:\n  {source}\n")
        response = requests.get(source, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        buffer: Union[str, StringIO] = StringIO(response.text)
    else:
        print(f"[load_records] Reading records from {source}")
        buffer = source

    try:
        df = pd.read_csv(
            buffer, sep=r"\s+", header=None, comment="#", float_precision="round_trip",
        )
    except pd.errors.EmptyDataError:
        print("[load_records] Source is empty — 0 records.")
        return []
    except pd.errors.ParserError as exc:
        raise MalformedInputError(f"could not parse {source}: {exc}") from exc

    if df.shape[1] != len(COLUMN_NAMES):
        raise MalformedInputError(
            f"{source}: expected {len(COLUMN_NAMES)} columns "
            f"({' '.join(COLUMN_NAMES)}), got {df.shape[1]}"
        )
    df.columns = COLUMN_NAMES

    missing = df.isna().any(axis=1)
    if missing.any():
        lines = [int(i) + 1 for i in df.index[missing][:5]]
        raise MalformedInputError(f"{source}: missing fields on data row(s) {lines}")

    for col in ("x1", "x2"):
        if not pd.api.types.is_numeric_dtype(df[col]):
            raise MalformedInputError(f"{source}: column {col} is not numeric")
    if not pd.api.types.is_integer_dtype(df["label"]):
        raise MalformedInputError(f"{source}: column label is not integer")

    records = [
        Record(x1, x2, label)
        for x1, x2, label in df.itertuples(index=False, name=None)
    ]

    print(f"[load_records] Loaded {len(records)} records.")
    print(f"  Label distribution:\n{df['label'].value_counts().sort_index().to_string()}\n")
    return records


# ════════════════════════════════════════════════════════════════════════════
# Stage 2 — Train/Test Split
# ════════════════════════════════════════════════════════════════════════════

def shuffle_and_split(
    records: list[Record],
    ratio: float = TRAIN_RATIO,
    seed: int = RANDOM_STATE,
) -> tuple[list[Record], list[Record]]:
    """
    Permute ``records`` in place with a seeded generator, then cut it.

    Indices ``[0, floor(ratio * n))`` become the training set and the rest
    the test set. The same seed, ratio and input always give the same split.
    ``ratio`` of 0 or 1 is legal and leaves one side empty.

    Raises
    ------
    ConfigurationError
        If ``ratio`` is outside [0, 1] or not a number, or ``seed`` is not a
        non-negative integer.
    """
    if isinstance(ratio, bool) or not isinstance(ratio, numbers.Real) or not 0.0 <= ratio <= 1.0:
        raise ConfigurationError(f"ratio must be a number in [0, 1], got {ratio!r}")
    # None would seed from OS entropy
    if isinstance(seed, bool) or not isinstance(seed, numbers.Integral) or seed < 0:
        raise ConfigurationError(f"seed must be a non-negative integer, got {seed!r}")

    rng = np.random.default_rng(seed)
    order = rng.permutation(len(records))
    records[:] = [records[i] for i in order]

    split_index = math.floor(ratio * len(records))
    return records[:split_index], records[split_index:]


# ════════════════════════════════════════════════════════════════════════════
# Stage 3 — Distance & Neighbour Search
# ════════════════════════════════════════════════════════════════════════════

def _euclidean(dx, dy):
    """Euclidean norm of the offsets; works on scalars and arrays alike."""
    return np.hypot(dx, dy)


def distance(a: Record, b: Record) -> float:
    """Euclidean distance between the feature pairs of ``a`` and ``b``."""
    return float(_euclidean(a.x1 - b.x1, a.x2 - b.x2))


def _check_k(k: int, n_train: int, strict: bool) -> None:
    if isinstance(k, bool) or not isinstance(k, numbers.Integral) or k <= 0:
        raise ConfigurationError(f"k must be a positive integer, got {k!r}")
    if strict and k > n_train:
        raise ConfigurationError(
            f"k ({k}) cannot exceed the number of training records ({n_train})"
        )


def neighbors(
    query: Record,
    train: Sequence[Record],
    k: int,
    strict: bool = True,
) -> list[Neighbor]:
    """
    Return the ``k`` training records closest to ``query``.

    Every training record is scored into a fresh ``Neighbor`` tuple, so the
    records themselves are never touched and repeated calls are independent.
    The ranking is a stable ascending sort on distance: equidistant records
    keep their training-set order, which also settles ties at the k-th slot.

    Parameters
    ----------
    query : Record
    train : sequence of Record
    k : int
        Number of neighbours, must be positive.
    strict : bool, default=True
        When False, ``k > len(train)`` returns every training record instead
        of raising.

    Raises
    ------
    ConfigurationError
        ``k <= 0``, or ``k > len(train)`` in strict mode.
    """
    _check_k(k, len(train), strict)
    if not train:
        return []

    coords = np.array([record.features for record in train], dtype=float)
    dists = _euclidean(coords[:, 0] - query.x1, coords[:, 1] - query.x2)
    order = np.argsort(dists, kind="stable")[:k]
    return [Neighbor(query, train[i], float(dists[i])) for i in order]


# ════════════════════════════════════════════════════════════════════════════
# Stage 4 — Majority Vote
# ════════════════════════════════════════════════════════════════════════════

def classify(nearest: Sequence[Union[Neighbor, Record]]) -> int:
    """
    Majority label among ``nearest``.

    When several labels share the highest count the smallest label value
    wins, so the vote never depends on dictionary ordering. Accepts either
    ``Neighbor`` tuples or bare records.
    """
    if not nearest:
        raise ConfigurationError("cannot classify without at least one neighbour")

    votes = Counter(
        item.candidate.label if isinstance(item, Neighbor) else item.label
        for item in nearest
    )
    max_count = max(votes.values())
    return min(label for label, count in votes.items() if count == max_count)


def predict_all(
    train: Sequence[Record],
    test: Sequence[Record],
    k: int = N_NEIGHBORS,
    strict: bool = True,
) -> Sequence[Record]:
    """Write a k-NN prediction into every test record and return ``test``."""
    _check_k(k, len(train), strict)
    for record in test:
        record.prediction = classify(neighbors(record, train, k, strict=strict))
    return test


# ════════════════════════════════════════════════════════════════════════════
# Stage 5 — Evaluate
# ════════════════════════════════════════════════════════════════════════════

def evaluate(test: Sequence[Record]) -> tuple[float, list[Record]]:
    """
    Accuracy of the predictions on ``test`` and the records it got wrong.

    Returns
    -------
    accuracy : float
        ``correct / len(test)``, in [0, 1].
    misclassified : list[Record]
        Records with ``label != prediction``, in test-set order.

    Raises
    ------
    EmptyTestSetError
        There is no data to evaluate.
    MissingPredictionError
        At least one record was never classified.
    """
    if not test:
        raise EmptyTestSetError("no data to evaluate: the test set is empty")

    unset = [record for record in test if not record.has_prediction]
    if unset:
        raise MissingPredictionError(
            f"{len(unset)} of {len(test)} test records have no prediction "
            f"(first: {unset[0]!r}); run predict_all() before evaluate()"
        )

    misclassified = [record for record in test if not record.is_correct]
    accuracy = (len(test) - len(misclassified)) / len(test)
    return accuracy, misclassified


def evaluation_report(test: Sequence[Record]) -> dict:
    """
    Accuracy plus weighted precision, recall and F1-score for ``test``.

    Prints a full classification report. Weighted averaging keeps the
    scores meaningful when the classes are unevenly represented.

    Returns
    -------
    metrics : dict
        {'accuracy', 'precision', 'recall', 'f1'} as floats.
    """
    evaluate(test)
    y_true = [record.label for record in test]
    y_pred = [record.prediction for record in test]

    metrics = {
        "accuracy" : float(accuracy_score(y_true, y_pred)),
        "precision": float(precision_score(y_true, y_pred, average="weighted", zero_division=0)),
        "recall"   : float(recall_score(y_true, y_pred, average="weighted", zero_division=0)),
        "f1"       : float(f1_score(y_true, y_pred, average="weighted", zero_division=0)),
    }

    print("=" * 60)
    print("MODEL EVALUATION")
    print("=" * 60)
    print(f"  Accuracy  : {metrics['accuracy']:.4f}")
    print(f"  Precision : {metrics['precision']:.4f}  (weighted)")
    print(f"  Recall    : {metrics['recall']:.4f}  (weighted)")
    print(f"  F1-Score  : {metrics['f1']:.4f}  (weighted)")
    print()
    print("Classification Report:")
    print(classification_report(y_true, y_pred, zero_division=0))
    return metrics


# ════════════════════════════════════════════════════════════════════════════
# Stage 6 — Output (frame export & plots)
# ════════════════════════════════════════════════════════════════════════════

def records_frame(train: Sequence[Record], test: Sequence[Record]) -> pd.DataFrame:
    """
    Tabular view of both splits.

    Columns: x1, x2, label, prediction (nullable, unset on train rows),
    split ('train' or 'test').
    """
    tagged = [(r, "train") for r in train] + [(r, "test") for r in test]
    return pd.DataFrame({
        "x1"        : pd.Series([r.x1 for r, _ in tagged], dtype="float64"),
        "x2"        : pd.Series([r.x2 for r, _ in tagged], dtype="float64"),
        "label"     : pd.Series([r.label for r, _ in tagged], dtype="int64"),
        "prediction": pd.array([r.prediction for r, _ in tagged], dtype="Int64"),
        "split"     : pd.Series([s for _, s in tagged], dtype="object"),
    })


def _label_color(value) -> object:
    if pd.isna(value):
        return "grey"
    value = int(value)
    if value in LABEL_COLORS:
        return LABEL_COLORS[value]
    return matplotlib.colors.to_hex(matplotlib.colormaps["tab10"](value % 10))


def plot_scatter(
    train: Sequence[Record],
    test: Sequence[Record],
    path: Union[str, Path] = PLOT_FILE,
) -> Path:
    """
    Save a scatter plot of both splits.

    Training points are drawn as triangles coloured by their label, test
    points as plus markers coloured by their prediction.
    """
    frame = records_frame(train, test)
    size_in = PLOT_SIZE_PX / PLOT_DPI

    fig, ax = plt.subplots(figsize=(size_in, size_in), dpi=PLOT_DPI)
    # Train points carry a label, test points carry a prediction
    for split, marker, column in (("train", "^", "label"), ("test", "+", "prediction")):
        subset = frame[frame["split"] == split]
        if subset.empty:
            continue
        ax.scatter(
            subset["x1"], subset["x2"],
            c=[_label_color(v) for v in subset[column]],
            marker=marker,
            s=36,
            label=f"{split} ({column})",
        )

    ax.set_title("Scatter plot of data")
    ax.set_xlabel("x1")
    ax.set_ylabel("x2")
    if not frame.empty:
        ax.legend(loc="best")

    path = Path(path)
    fig.savefig(path, dpi=PLOT_DPI)
    plt.close(fig)
    print(f"[plot_scatter] Saved {path}")
    return path


def plot_confusion_matrix(
    test: Sequence[Record],
    path: Union[str, Path],
    k: int | None = None,
) -> Path:
    """Save the confusion matrix of the test predictions."""
    evaluate(test)
    fig, ax = plt.subplots(figsize=(6, 5))
    ConfusionMatrixDisplay.from_predictions(
        [record.label for record in test],
        [record.prediction for record in test],
        colorbar=True,
        ax=ax,
        cmap="Blues",
    )
    title = "Confusion Matrix — k-NN" + (f" (k={k})" if k is not None else "")
    ax.set_title(title, fontsize=12)
    fig.tight_layout()

    path = Path(path)
    fig.savefig(path)
    plt.close(fig)
    print(f"[plot_confusion_matrix] Saved {path}")
    return path


# ════════════════════════════════════════════════════════════════════════════
# Orchestrator — main()
# ════════════════════════════════════════════════════════════════════════════

def main(
    source: Union[str, Path, Sequence[Record]] = DATA_FILE,
    ratio: float = TRAIN_RATIO,
    k: int = N_NEIGHBORS,
    seed: int = RANDOM_STATE,
    strict: bool = True,
    plot_path: Union[str, Path, None] = PLOT_FILE,
) -> dict:
    """
    End-to-end k-NN hold-out evaluation.

        load_records(source)
            └─► shuffle_and_split  (seeded)
                    └─► predict_all(train, test, k)
                            └─► evaluate(test)
                                    └─► plot_scatter  (optional)

    ``source`` may also be an already-built list of records, which is then
    shuffled in place.

    Returns
    -------
    dict
        'records'       : list[Record] — full set, in shuffled order
        'train'         : list[Record]
        'test'          : list[Record] — every record carries a prediction
        'accuracy'      : float
        'misclassified' : list[Record]
        'config'        : dict — ratio, k, seed, strict
        'plot'          : Path | None
    """
    print("╔══════════════════════════════════════════════════════╗")
    print("║   k-NN Hold-out Classification — Pipeline Run       ║")
    print("╚══════════════════════════════════════════════════════╝\n")
    print(f"  ratio={ratio}  k={k}  seed={seed}  strict={strict}\n")

    # ── Stage 1: Acquire data ────────────────────────────────────────────
    print("── Stage 1: Data Acquisition ──────────────────────────")
    if isinstance(source, (str, Path)):
        records = load_records(source)
    else:
        records = source if isinstance(source, list) else list(source)
        print(f"  Using {len(records)} in-memory records\n")

    # ── Stage 2: Split ───────────────────────────────────────────────────
    print("── Stage 2: Train/Test Split ──────────────────────────")
    train, test = shuffle_and_split(records, ratio=ratio, seed=seed)
    print(f"  Train : {len(train)} records")
    print(f"  Test  : {len(test)} records\n")

    # ── Stage 3: Predict ─────────────────────────────────────────────────
    print("── Stage 3: Neighbour Vote ────────────────────────────")
    predict_all(train, test, k=k, strict=strict)
    print(f"  Classified {len(test)} test records\n")

    # ── Stage 4: Evaluate ────────────────────────────────────────────────
    print("── Stage 4: Evaluation ────────────────────────────────")
    accuracy, misclassified = evaluate(test)
    print(f"  Classification accuracy : {accuracy:.4f}")
    print(f"  Misclassified           : {len(misclassified)}")
    for record in misclassified:
        print(f"    {record!r}")
    print()

    plot = None
    if plot_path is not None:
        print("── Stage 5: Scatter Plot ──────────────────────────────")
        plot = plot_scatter(train, test, plot_path)
        print()

    print("╔══════════════════════════════════════════════════════╗")
    print("║   Pipeline complete.                                 ║")
    print("╚══════════════════════════════════════════════════════╝")

    return {
        "records"       : records,
        "train"         : train,
        "test"          : test,
        "accuracy"      : accuracy,
        "misclassified" : misclassified,
        "config"        : {"ratio": ratio, "k": k, "seed": seed, "strict": strict},
        "plot"          : plot,
    }


# ════════════════════════════════════════════════════════════════════════════
# Sanity Checks
# ════════════════════════════════════════════════════════════════════════════

def run_sanity_checks(results: dict) -> int:
    """
    Assert-based checks over the artefacts returned by main().

    Checks
    ------
    1  Train + Test == Total records        (no dropped/duplicated records)
    2  Train and Test share no record       (disjoint views)
    3  Train split size == floor(ratio * n)
    4  Every test record has a prediction
    5  Train records carry no prediction
    6  Accuracy in [0, 1]
    7  Accuracy == 1.0 iff nothing misclassified
    8  Misclassified count matches accuracy

    Returns
    -------
    int  Number of checks passed.

    Raises
    ------
    AssertionError  On the first failing check, with label + FIX hint.
    """
    checks_passed = 0

    def check(condition: bool, label: str, fix: str = "") -> None:
        nonlocal checks_passed
        msg = label + (f"\n         FIX → {fix}" if fix else "")
        assert condition, msg
        checks_passed += 1
        print(f"  [PASS]  {label}")

    records = results["records"]
    train, test = results["train"], results["test"]
    accuracy, misclassified = results["accuracy"], results["misclassified"]
    ratio = results["config"]["ratio"]

    print("=" * 60)
    print("SANITY CHECKS")
    print("=" * 60)

    check(
        len(train) + len(test) == len(records),
        f"Train ({len(train)}) + Test ({len(test)}) == {len(records)}",
        "Split the same list that was shuffled; never copy records.",
    )

    overlap = {id(r) for r in train} & {id(r) for r in test}
    check(
        not overlap,
        f"Train and Test are disjoint  ({len(overlap)} shared)",
        "Cut the permuted list once with a single split index.",
    )

    expected_train = math.floor(ratio * len(records))
    check(
        len(train) == expected_train,
        f"Train size == floor({ratio} * {len(records)})  (got {len(train)})",
        "Use math.floor(ratio * n) as the split index.",
    )

    unset = sum(not r.has_prediction for r in test)
    check(
        unset == 0,
        f"Every test record has a prediction  ({unset} missing)",
        "Run predict_all(train, test, k) before evaluate().",
    )

    leaked = sum(r.has_prediction for r in train)
    check(
        leaked == 0,
        f"Train records carry no prediction  ({leaked} found)",
        "Only write predictions on test records.",
    )

    check(
        0.0 <= accuracy <= 1.0,
        f"Accuracy in [0, 1]  ({accuracy:.4f})",
    )

    check(
        (accuracy == 1.0) == (not misclassified),
        f"Accuracy == 1.0 iff no misclassified records  ({len(misclassified)} wrong)",
        "Build misclassified from the same test list used for accuracy.",
    )

    check(
        len(test) - len(misclassified) == round(accuracy * len(test)),
        f"Correct count ({len(test) - len(misclassified)}) matches accuracy",
    )

    print()
    print("=" * 60)
    print(f"  {checks_passed} checks passed")
    print("=" * 60)
    return checks_passed


# ════════════════════════════════════════════════════════════════════════════
# Command line
# ════════════════════════════════════════════════════════════════════════════

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="knn-holdout",
        description="k-NN classification of 2-D points with a held-out test split.",
    )
    p.add_argument("-i", "--input", default=DATA_FILE,
                   help="data file or http(s) URL with 'x1 x2 label' rows")
    p.add_argument("-r", "--ratio", type=float, default=TRAIN_RATIO,
                   help="fraction of records used for training")
    p.add_argument("-k", type=int, default=N_NEIGHBORS,
                   help="number of neighbours to consider")
    p.add_argument("--seed", type=int, default=RANDOM_STATE,
                   help="shuffle seed")
    p.add_argument("--relaxed", action="store_true",
                   help="allow k larger than the training set (uses all training records)")
    p.add_argument("--plot", default=PLOT_FILE,
                   help="where to save the scatter plot")
    p.add_argument("--no-plot", action="store_true",
                   help="skip the scatter plot")
    p.add_argument("--export", default=None,
                   help="write train/test records with predictions to this CSV file")
    p.add_argument("--report", action="store_true",
                   help="print precision/recall/F1 and run sanity checks")
    p.add_argument("--confusion", default=None,
                   help="save the confusion matrix of the test predictions to this PNG file")
    return p


def cli(argv: Sequence[str] | None = None) -> int:
    """
    Command-line entry point.

    Exit codes
    ----------
    0  success
    1  the input could not be read, or an output file could not be written
    2  invalid configuration, malformed input or nothing to evaluate
    3  a sanity check failed (``--report``)
    """
    args = build_parser().parse_args(argv)

    try:
        results = main(
            source=args.input,
            ratio=args.ratio,
            k=args.k,
            seed=args.seed,
            strict=not args.relaxed,
            plot_path=None if args.no_plot else args.plot,
        )
        if args.report:
            evaluation_report(results["test"])
            run_sanity_checks(results)
    except KNNError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except AssertionError as exc:
        print(f"error: sanity check failed: {exc}", file=sys.stderr)
        return 3
    except (OSError, requests.RequestException) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    try:
        if args.confusion:
            plot_confusion_matrix(results["test"], args.confusion, k=args.k)
        if args.export:
            records_frame(results["train"], results["test"]).to_csv(args.export, index=False)
            print(f"[cli] Wrote {args.export}")
    except OSError as exc:
        print(f"error: could not write output: {exc}", file=sys.stderr)
        return 1
    return 0


# ── Entry point ──────────────────────────────────────────────────────────────
if __name__ == "__main__":
    sys.exit(cli())
