"""
Structured predictor keys.

Every wide-table column and regression term is identified by a
``(metric, brand_id)`` pair. Names such as ``LOGPRICE3`` are rendered from and
parsed back into that pair in one place so lookups never depend on ad-hoc
string matching.
"""
import re
from typing import Iterable, List, NamedTuple, Optional

from model.constants import PREDICTOR_METRICS, WIDE_METRICS

_NAME_PATTERN = re.compile(r"^(%s)(\d+)$" % "|".join(WIDE_METRICS))


class PredictorKey(NamedTuple):
    """A (metric, brand) pair naming one wide-table column."""
    metric: str
    brand_id: int

    @property
    def name(self) -> str:
        return column_name(self.metric, self.brand_id)

    @classmethod
    def parse(cls, name: str) -> Optional["PredictorKey"]:
        """Parse ``{METRIC}{brand_id}``; returns None for the intercept or unknown names."""
        match = _NAME_PATTERN.match(str(name))
        if match is None:
            return None
        return cls(match.group(1), int(match.group(2)))


def column_name(metric: str, brand_id: int) -> str:
    if metric not in WIDE_METRICS:
        raise ValueError(f"Unknown metric: {metric}")
    return f"{metric}{int(brand_id)}"


def brands_in_columns(columns: Iterable[str]) -> List[int]:
    """Sorted brand ids that have at least one recognised column."""
    keys = (PredictorKey.parse(c) for c in columns)
    return sorted({k.brand_id for k in keys if k is not None})


def predictor_keys(target_brand: int, brand_ids: Iterable[int]) -> List[PredictorKey]:
    """
    Full predictor set for one brand's demand model.

    The target brand's own variables come first, followed by every other
    brand in id order; within a brand the metric order is fixed.
    """
    others = sorted(b for b in set(int(b) for b in brand_ids) if b != int(target_brand))
    ordered = [int(target_brand)] + others
    return [PredictorKey(metric, brand) for brand in ordered for metric in PREDICTOR_METRICS]
