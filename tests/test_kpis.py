import pytest

from eventlens.services.kpis import KpiSummary, compute_kpis
from eventlens.services.synthesizer import generate_events


def test_revenue_sums_purchases_only(make_event):
    events = [
        make_event('purchase', revenue=100),
        make_event('purchase', revenue=50),
        make_event('page_view'),
    ]
    assert compute_kpis(events).total_revenue == 150


def test_empty_collection():
    kpis = compute_kpis([])
    assert kpis == KpiSummary.empty()
    assert kpis.unique_users == 0
    assert kpis.conversion_rate == 0
    assert kpis.total_revenue == 0
    assert kpis.date_from is None and kpis.date_to is None


def test_conversion_counts_signup_or_purchase(make_event):
    events = [
        make_event('page_view', user_id='u_1'),
        make_event('signup', user_id='u_1'),
        make_event('page_view', user_id='u_2'),
        make_event('purchase', user_id='u_3'),
        make_event('purchase', user_id='u_3'),
        make_event('click', user_id='u_4'),
    ]
    kpis = compute_kpis(events)
    assert kpis.unique_users == 4
    assert kpis.conversion_rate == pytest.approx(0.5)


def test_unique_sessions_and_date_range(make_event):
    events = [
        make_event(session_id='s_1', timestamp=3_000),
        make_event(session_id='s_2', timestamp=1_000),
        make_event(session_id='s_1', timestamp=2_000),
    ]
    kpis = compute_kpis(events)
    assert kpis.unique_sessions == 2
    assert kpis.date_from == 1_000
    assert kpis.date_to == 3_000


def test_order_independent(reference_time):
    events = generate_events(11, 30, 3000, reference_time=reference_time)
    assert compute_kpis(events) == compute_kpis(list(reversed(events)))


def test_conversion_rate_bounded(reference_time):
    kpis = compute_kpis(generate_events(42, 30, 5000, reference_time=reference_time))
    assert 0 <= kpis.conversion_rate <= 1
    assert kpis.unique_sessions >= 1
    assert kpis.total_revenue > 0


def test_dict_round_trip(make_event):
    kpis = compute_kpis([make_event('purchase', revenue=25)])
    assert KpiSummary.from_dict(kpis.to_dict()) == kpis
