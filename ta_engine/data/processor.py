"""
Price series normalization and repair.

Provider data is unreliable: rows may arrive out of order, with missing
prices, inverted high/low or negative values. Every series passes through
repair_series before any indicator sees it.
"""

import math
from collections.abc import Iterable, Mapping, Sequence
from datetime import UTC, date, datetime
from typing import Any, Optional

import structlog

from ..errors import ValidationError
from .models import PriceBar

logger = structlog.get_logger(__name__)


def _parse_date(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=UTC)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        # Heuristic: values this large are epoch milliseconds
        seconds = value / 1000 if value > 1e11 else value
        return datetime.fromtimestamp(seconds, tz=UTC)
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValidationError(f"Invalid date: {value!r}", field="date") from e
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)
    raise ValidationError(f"Invalid date: {value!r}", field="date")


def _parse_number(value: Any) -> float:
    """Parse a price or volume; anything unusable becomes NaN for repair."""
    if value is None or isinstance(value, bool):
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def normalize_raw_bars(rows: Iterable[Mapping[str, Any]]) -> list[PriceBar]:
    """
    Convert provider rows into PriceBar objects.

    Rows need a "date" (or "timestamp") key. Missing or non-numeric prices
    are kept as NaN so that repair_series can fill them from neighbours.

    Raises:
        ValidationError: if a row has no usable date
    """
    bars = []
    for row in rows:
        raw_date = row.get("date", row.get("timestamp"))
        if raw_date is None:
            raise ValidationError("Price row is missing a date", field="date")
        bars.append(PriceBar(
            date=_parse_date(raw_date),
            open=_parse_number(row.get("open")),
            high=_parse_number(row.get("high")),
            low=_parse_number(row.get("low")),
            close=_parse_number(row.get("close")),
            volume=_parse_number(row.get("volume")),
        ))
    return bars


def _is_missing(value: float) -> bool:
    return value is None or math.isnan(value)


def _next_valid_close(bars: Sequence[PriceBar], start: int) -> Optional[float]:
    for bar in bars[start:]:
        if not _is_missing(bar.close):
            return bar.close
    return None


def repair_series(bars: Iterable[PriceBar]) -> list[PriceBar]:
    """
    Sort a series by date and enforce OHLC consistency.

    - a bar with any missing price takes the previous bar's close for all
      four prices (the first valid close for the first bar)
    - missing volume becomes 0
    - inverted high/low are swapped, then high >= open/close >= low
    - negative values clamp to 0
    """
    ordered = sorted(bars, key=lambda bar: bar.date)
    repaired: list[PriceBar] = []
    fixes = 0

    for index, bar in enumerate(ordered):
        o, h, l, c, v = bar.open, bar.high, bar.low, bar.close, bar.volume

        if any(_is_missing(x) for x in (o, h, l, c)):
            if repaired:
                fill = repaired[-1].close
            else:
                fill = _next_valid_close(ordered, index)
                if fill is None:
                    fill = 0.0
            o = h = l = c = fill
        if _is_missing(v):
            v = 0.0

        if h < l:
            h, l = l, h
        h = max(h, o, c)
        l = min(l, o, c)

        o, h, l, c, v = (max(x, 0.0) for x in (o, h, l, c, v))

        fixed = PriceBar(date=bar.date, open=o, high=h, low=l, close=c, volume=v)
        if fixed != bar:
            fixes += 1
        repaired.append(fixed)

    if fixes:
        logger.info("Repaired price bars", repaired_count=fixes, total=len(repaired))
    return repaired


def closes(bars: Sequence[PriceBar]) -> list[float]:
    return [bar.close for bar in bars]


def highs(bars: Sequence[PriceBar]) -> list[float]:
    return [bar.high for bar in bars]


def lows(bars: Sequence[PriceBar]) -> list[float]:
    return [bar.low for bar in bars]


def volumes(bars: Sequence[PriceBar]) -> list[float]:
    return [bar.volume for bar in bars]
