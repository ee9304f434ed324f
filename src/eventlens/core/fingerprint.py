"""
Content fingerprints for event collections

Cache keys are derived from what a collection contains, not from its
identity, so two equal collections built independently share cached
aggregates.
"""

import hashlib
from typing import Iterable, Sequence

from eventlens.core.event_model import Event


def _canonical_field(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return repr(value)
    return str(value)


def events_fingerprint(events: Sequence[Event]) -> str:
    """SHA-1 over every event's field tuple, in collection order"""
    h = hashlib.sha1()
    h.update(str(len(events)).encode("ascii"))
    for event in events:
        fields = list(event.field_tuple())
        if fields[-1] is not None:
            fields[-1] = float(fields[-1])
        h.update(b"\x1e")
        h.update("\x1f".join(_canonical_field(v) for v in fields).encode("utf-8"))
    return h.hexdigest()


def params_fingerprint(parts: Iterable) -> str:
    """Short stable hash of aggregation parameters"""
    joined = "|".join(_canonical_field(p) for p in parts)
    return hashlib.sha1(joined.encode("utf-8")).hexdigest()[:16]
