"""
CSV import/export for event collections

Import keeps the Event invariants: rows missing a required field, or that
cannot form a valid Event, are dropped rather than patched.
"""

import io
import logging
from typing import List, Optional, Sequence

import pandas as pd

from eventlens.core.errors import ImportValidationError, InvalidArgument
from eventlens.core.event_model import Event, epoch_ms_to_iso, now_ms

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["id", "userId", "sessionId", "timestamp", "eventType", "url", "device", "country", "revenue"]
REQUIRED_COLUMNS = ["id", "userId", "sessionId", "timestamp", "eventType", "url", "device", "country"]

# Older exports used `event` for the event type column
COLUMN_ALIASES = {"event": "eventType"}


def export_events_csv(events: Sequence[Event]) -> str:
    """Serialize events with ISO-8601 timestamps; revenue blank when unset"""
    rows = [
        {
            "id": e.id,
            "userId": e.user_id,
            "sessionId": e.session_id,
            "timestamp": epoch_ms_to_iso(e.timestamp),
            "eventType": e.event_type.value,
            "url": e.url,
            "device": e.device.value,
            "country": e.country,
            "revenue": e.revenue,
        }
        for e in events
    ]
    df = pd.DataFrame(rows, columns=CSV_COLUMNS)
    df["revenue"] = df["revenue"].map(_format_revenue)
    return df.to_csv(index=False, lineterminator="\n")


def _format_revenue(value) -> str:
    if value is None or pd.isna(value):
        return ""
    value = float(value)
    # Whole units without a trailing .0
    return str(int(value)) if value.is_integer() else repr(value)


def _parse_timestamps(values: pd.Series, fallback_ms: int) -> pd.Series:
    """ISO-8601 strings or epoch milliseconds; anything else becomes fallback_ms"""
    numeric = pd.to_numeric(values, errors="coerce")
    parsed = pd.to_datetime(values.where(numeric.isna()), errors="coerce", utc=True, format="mixed")
    ms = (parsed - pd.Timestamp(0, tz="UTC")) // pd.Timedelta(milliseconds=1)
    ms = ms.where(parsed.notna(), numeric.round())
    return ms.where(ms.notna(), fallback_ms).astype("int64")


def import_events_csv(text: str, now: Optional[int] = None) -> List[Event]:
    """
    Parse CSV text into events.

    Invalid timestamps default to `now` (sampled once when omitted). Invalid
    or absent revenue becomes unset.

    Raises:
        ImportValidationError: malformed CSV, or no valid rows
    """
    fallback_ms = now if now is not None else now_ms()

    try:
        df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False, skip_blank_lines=True)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ImportValidationError(f"CSV parsing error: {e}") from e

    df = df.rename(columns={k: v for k, v in COLUMN_ALIASES.items() if v not in df.columns})
    missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise ImportValidationError(f"CSV is missing required columns: {', '.join(missing)}")

    # short rows come back as NaN even with keep_default_na=False
    df = df.fillna("")
    for column in REQUIRED_COLUMNS:
        df[column] = df[column].str.strip()
    complete = (df[REQUIRED_COLUMNS] != "").all(axis=1)
    dropped_incomplete = int((~complete).sum())
    df = df[complete]

    timestamps = _parse_timestamps(df["timestamp"], fallback_ms)
    if "revenue" in df.columns:
        revenues = pd.to_numeric(df["revenue"], errors="coerce")
    else:
        revenues = pd.Series(float("nan"), index=df.index)

    events: List[Event] = []
    dropped_invalid = 0
    for row, ts, revenue in zip(df.itertuples(index=False), timestamps, revenues):
        record = row._asdict()
        try:
            events.append(Event(
                id=record["id"],
                user_id=record["userId"],
                session_id=record["sessionId"],
                timestamp=int(ts),
                event_type=record["eventType"],
                url=record["url"],
                device=record["device"],
                country=record["country"],
                # zero or negative revenue counts as unset
                revenue=float(revenue) if pd.notna(revenue) and revenue > 0 else None,
            ))
        except InvalidArgument as e:
            dropped_invalid += 1
            logger.debug("Dropping CSV row %s: %s", record.get("id"), e)

    if dropped_incomplete or dropped_invalid:
        logger.info(
            "CSV import dropped %d incomplete and %d invalid rows",
            dropped_incomplete, dropped_invalid,
        )

    if not events:
        raise ImportValidationError("No valid events found in CSV")

    return events
