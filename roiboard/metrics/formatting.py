"""Display helpers shared by tables and charts.

Both treat NOT_APPLICABLE (and any stray non-finite float) as the explicit
"N/A" category so a cell never shows a blank, "nan" or "inf".
"""

import math
from typing import Optional, Sequence

from roiboard.config import get_settings
from roiboard.metrics.roi import NOT_APPLICABLE, ROI

NA_LABEL = "N/A"


def format_roi(roi: ROI, places: Optional[int] = None) -> str:
    """Fixed-point ROI text, e.g. ``"5.00"``, or ``"N/A"``."""
    if places is None:
        places = get_settings().roi_decimal_places
    if roi is NOT_APPLICABLE or not math.isfinite(roi):
        return NA_LABEL
    return f"{roi:.{places}f}"


def bucket_labels(edges: Sequence[float]) -> list[str]:
    """Chart bucket labels for the given edges, N/A last.

    edges [0, 1, 5] -> ["<0", "0-1", "1-5", "5+", "N/A"]
    """
    labels = [f"<{_fmt_edge(edges[0])}"]
    for low, high in zip(edges, edges[1:]):
        labels.append(f"{_fmt_edge(low)}-{_fmt_edge(high)}")
    labels.append(f"{_fmt_edge(edges[-1])}+")
    labels.append(NA_LABEL)
    return labels


def roi_bucket(roi: ROI, edges: Optional[Sequence[float]] = None) -> str:
    """Bucket label for a single ROI value. Lower edges are inclusive."""
    if edges is None:
        edges = get_settings().roi_bucket_edges
    labels = bucket_labels(edges)
    if roi is NOT_APPLICABLE or not math.isfinite(roi):
        return NA_LABEL
    index = 0
    for edge in edges:
        if roi >= edge:
            index += 1
        else:
            break
    return labels[index]


def _fmt_edge(edge: float) -> str:
    return str(int(edge)) if float(edge).is_integer() else f"{edge:g}"
