"""
src/data/dataset.py — Dataset loading and aggregation

Fetches a group/subgroup/value CSV from a URL or a local directory, parses
it into DataPoints, and rolls the rows up into a GroupedSeries.

The fetch is blocking I/O, so DatasetLoader.load runs it in a worker
thread; the event loop is free while the file downloads.
"""

from __future__ import annotations

import asyncio
import csv
import io
import logging
import math
import urllib.error
import urllib.parse
import urllib.request
from pathlib import Path
from typing import Iterable

from src.narrative.errors import DataLoadError, InconsistentDomainError
from src.narrative.models import DataPoint, GroupedSeries, GroupSeries, SubgroupValue

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("group", "subgroup", "value")

USER_AGENT = "time-use-narrative/0.1"


# ── Location ──────────────────────────────────────────────────────


def _is_url(location: str) -> bool:
    return urllib.parse.urlparse(location).scheme in ("http", "https", "file")


def resolve_ref(base: str, dataset_ref: str) -> str:
    """Resolve a dataset reference ("scene1.csv") against a base URL or directory."""
    if _is_url(dataset_ref) or Path(dataset_ref).is_absolute():
        return dataset_ref
    if _is_url(base):
        if not base.endswith("/"):
            base += "/"
        return urllib.parse.urljoin(base, dataset_ref)
    return str(Path(base) / dataset_ref)


def fetch_text(location: str, timeout: float = 30.0) -> str:
    """Read a dataset as text. Raises DataLoadError on any I/O failure."""
    try:
        if _is_url(location):
            req = urllib.request.Request(location, headers={"User-Agent": USER_AGENT})
            with urllib.request.urlopen(req, timeout=timeout) as resp:
                raw = resp.read()
        else:
            raw = Path(location).read_bytes()
        return raw.decode("utf-8-sig")
    except (OSError, urllib.error.URLError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"Could not fetch dataset {location}: {exc}") from exc


# ── Parsing ───────────────────────────────────────────────────────


def parse_rows(text: str, source: str = "<dataset>") -> list[DataPoint]:
    """Parse CSV text with group, subgroup and value columns."""
    try:
        reader = csv.DictReader(io.StringIO(text))
        fieldnames = [f.strip() for f in (reader.fieldnames or [])]
        missing = [c for c in REQUIRED_COLUMNS if c not in fieldnames]
        if missing:
            raise DataLoadError(f"{source}: missing column(s) {', '.join(missing)}")
        reader.fieldnames = fieldnames

        rows: list[DataPoint] = []
        for line_no, record in enumerate(reader, start=2):
            if not any((v or "").strip() for v in record.values() if isinstance(v, str)):
                continue  # blank line
            rows.append(_parse_record(record, source, line_no))
    except csv.Error as exc:
        raise DataLoadError(f"{source}: malformed CSV: {exc}") from exc

    if not rows:
        raise DataLoadError(f"{source}: dataset has no rows")
    return rows


def _parse_record(record: dict, source: str, line_no: int) -> DataPoint:
    group = (record.get("group") or "").strip()
    subgroup = (record.get("subgroup") or "").strip()
    raw_value = (record.get("value") or "").strip()
    if not group or not subgroup:
        raise DataLoadError(f"{source}:{line_no}: empty group or subgroup")
    try:
        value = float(raw_value.replace(",", ""))
    except ValueError as exc:
        raise DataLoadError(f"{source}:{line_no}: value {raw_value!r} is not a number") from exc
    if not math.isfinite(value) or value < 0:
        raise DataLoadError(f"{source}:{line_no}: value {raw_value!r} is not a valid number of hours")
    return DataPoint(group=group, subgroup=subgroup, value=value)


# ── Aggregation ───────────────────────────────────────────────────


def aggregate(rows: Iterable[DataPoint]) -> GroupedSeries:
    """Sum values per (group, subgroup).

    Groups and subgroups keep first-occurrence order. Every group must
    carry the same subgroup keys; each group's values are emitted in the
    shared subgroup order.

    Raises:
        InconsistentDomainError: if a group's subgroup set differs.
    """
    totals: dict[str, dict[str, float]] = {}
    subgroup_order: dict[str, None] = {}
    for row in rows:
        per_group = totals.setdefault(row.group, {})
        per_group[row.subgroup] = per_group.get(row.subgroup, 0.0) + row.value
        subgroup_order.setdefault(row.subgroup, None)

    expected = list(subgroup_order)
    for group, per_group in totals.items():
        if set(per_group) != set(expected):
            raise InconsistentDomainError(
                f"Group {group!r} has subgroups {sorted(per_group)}, expected {sorted(expected)}"
            )

    return GroupedSeries(
        groups=[
            GroupSeries(
                name=group,
                values=[SubgroupValue(name=s, value=per_group[s]) for s in expected],
            )
            for group, per_group in totals.items()
        ]
    )


# ── Loader ────────────────────────────────────────────────────────


class DatasetLoader:
    """Loads datasets relative to a base URL or directory."""

    def __init__(self, base: str, timeout: float = 30.0):
        self.base = base
        self.timeout = timeout

    def location_of(self, dataset_ref: str) -> str:
        return resolve_ref(self.base, dataset_ref)

    def load_sync(self, dataset_ref: str) -> list[DataPoint]:
        location = self.location_of(dataset_ref)
        logger.debug("Fetching dataset %s", location)
        rows = parse_rows(fetch_text(location, timeout=self.timeout), source=dataset_ref)
        logger.info("Loaded %d rows from %s", len(rows), location)
        return rows

    async def load(self, dataset_ref: str) -> list[DataPoint]:
        """Fetch and parse without blocking the event loop."""
        return await asyncio.to_thread(self.load_sync, dataset_ref)
