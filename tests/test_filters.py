import pytest

from eventlens.core.errors import InvalidArgument
from eventlens.services.filters import FilterCriteria, apply_filters


@pytest.fixture
def events(make_event):
    return [
        make_event('page_view', device='desktop', country='Germany', timestamp=1_000),
        make_event('purchase', device='mobile', country='France', timestamp=2_000),
        make_event('click', device='mobile', country='Germany', timestamp=3_000),
        make_event('signup', device='tablet', country='Japan', timestamp=4_000),
    ]


def test_no_criteria_returns_copy(events):
    result = apply_filters(events, None)
    assert result == events
    assert result is not events
    assert apply_filters(events, FilterCriteria()) == events


def test_countries_and_devices_are_anded(events):
    criteria = FilterCriteria(countries=['Germany'], devices=['mobile'])
    assert [e.event_type.value for e in apply_filters(events, criteria)] == ['click']


def test_date_bounds_inclusive(events):
    criteria = FilterCriteria(date_from=2_000, date_to=3_000)
    assert [e.timestamp for e in apply_filters(events, criteria)] == [2_000, 3_000]


def test_event_types_and_purchases_only(events):
    assert len(apply_filters(events, FilterCriteria(event_types=['signup', 'click']))) == 2
    assert [e.event_type.value for e in apply_filters(events, FilterCriteria(purchases_only=True))] == ['purchase']


def test_empty_lists_impose_nothing(events):
    criteria = FilterCriteria(countries=[], devices=[], event_types=[])
    assert criteria.is_empty()
    assert apply_filters(events, criteria) == events


def test_input_not_mutated(events):
    before = list(events)
    apply_filters(events, FilterCriteria(devices=['tablet']))
    assert events == before


def test_invalid_criteria():
    with pytest.raises(InvalidArgument):
        FilterCriteria(devices=['watch'])
    with pytest.raises(InvalidArgument):
        FilterCriteria(date_from=10, date_to=5)


def test_fingerprint_ignores_list_order():
    a = FilterCriteria(countries=['Japan', 'France'], devices=['mobile', 'desktop'])
    b = FilterCriteria(countries=['France', 'Japan'], devices=['desktop', 'mobile'])
    assert a.fingerprint() == b.fingerprint()
    assert a.fingerprint() != FilterCriteria(countries=['France']).fingerprint()
