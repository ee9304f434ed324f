import pytest

from eventlens.core.event_model import Event
from eventlens.core.reference_data import MS_PER_DAY

# 2023-11-14T22:13:20Z, a Tuesday
REFERENCE_TIME = 1_700_000_000_000


@pytest.fixture
def reference_time():
    return REFERENCE_TIME


@pytest.fixture
def make_event():
    """Factory for hand-built events; purchases default to revenue 100"""
    counter = {'n': 0}

    def _make(
        event_type='page_view',
        revenue=None,
        user_id='u_1',
        session_id='s_1',
        timestamp=REFERENCE_TIME - MS_PER_DAY // 2,
        device='desktop',
        country='Germany',
        url='/home',
        id=None,
    ):
        counter['n'] += 1
        if event_type == 'purchase' and revenue is None:
            revenue = 100
        return Event(
            id=id or f"evt_{counter['n']}_{timestamp}",
            user_id=user_id,
            session_id=session_id,
            timestamp=timestamp,
            event_type=event_type,
            url=url,
            device=device,
            country=country,
            revenue=revenue,
        )

    return _make
