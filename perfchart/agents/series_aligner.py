"""
Series Aligner.

Outer-joins several normalized series on their month label so they can be
plotted on one shared axis.
"""

import logging
from typing import Iterable, List, Sequence, Tuple

import pandas as pd

from ..models import AlignedRow, NormalizedPoint

logger = logging.getLogger(__name__)


def merge_series(series: Iterable[Tuple[str, Sequence[NormalizedPoint]]]) -> List[AlignedRow]:
    """
    Merge labelled series into rows keyed by date label.

    Every label seen in any series gets one row. A ticker appears in a row's
    values only if it has a point for that label; missing data is never
    filled. Rows are sorted ascending by label.
    """
    columns = {}
    for symbol, points in series:
        if not points:
            continue
        column = pd.Series(
            [p.value for p in points],
            index=[p.date_label for p in points],
            dtype="float64",
        )
        column = column[~column.index.duplicated(keep="last")]
        if symbol in columns:
            column = column.combine_first(columns[symbol])
        columns[symbol] = column

    if not columns:
        return []

    frame = pd.concat(columns, axis=1, join="outer").sort_index()

    rows = []
    for label, row in frame.iterrows():
        present = row.dropna()
        rows.append(AlignedRow(
            date_label=str(label),
            values={str(symbol): float(value) for symbol, value in present.items()},
        ))

    logger.debug(f"Aligned {len(columns)} series into {len(rows)} rows")
    return rows


class SeriesAligner:
    """Thin object wrapper so the aligner can be swapped in the orchestrator."""

    def merge(self, series: Iterable[Tuple[str, Sequence[NormalizedPoint]]]) -> List[AlignedRow]:
        return merge_series(series)
