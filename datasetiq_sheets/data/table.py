"""Spill-array construction for table formulas."""

from typing import Any, Iterable

import pandas as pd

from datasetiq_sheets.models import Observation


HEADER_ROW = ["Date", "Value"]


def _as_pair(item: Any) -> tuple[Any, Any] | None:
    if isinstance(item, Observation):
        return item.date, item.value
    if isinstance(item, (list, tuple)) and len(item) >= 2:
        return item[0], item[1]
    return None


def build_table(observations: Iterable[Any] | None) -> list[list[Any]]:
    """
    Build a header row plus one row per observation, newest first.

    Accepts Observation objects or (date, value) pairs. Rows with equal dates
    keep their input order; dates that do not parse sort last. Input that is
    not a list or tuple yields the header alone.
    """
    if not isinstance(observations, (list, tuple)):
        return [list(HEADER_ROW)]

    pairs = [pair for pair in map(_as_pair, observations) if pair is not None]
    if not pairs:
        return [list(HEADER_ROW)]

    df = pd.DataFrame(pairs, columns=["date", "value"], dtype=object)
    df["parsed"] = pd.to_datetime(df["date"], format="ISO8601", errors="coerce", utc=True)
    df = df.sort_values("parsed", ascending=False, kind="stable", na_position="last")

    rows = [[obs_date, value] for obs_date, value in zip(df["date"], df["value"])]
    return [list(HEADER_ROW), *rows]
