import pytest

from eventlens.core.errors import InvalidArgument
from eventlens.services.breakdown import BreakdownEntry, breakdown_by
from eventlens.services.synthesizer import generate_events


@pytest.fixture
def device_events(make_event):
    devices = ['desktop'] * 5 + ['mobile'] * 3 + ['tablet']
    return [make_event(device=d) for d in devices]


def test_top_two_devices(device_events):
    result = breakdown_by(device_events, 'device', 2)

    assert [(e.value, e.count) for e in result] == [('desktop', 5), ('mobile', 3)]
    assert result[0].percentage == pytest.approx(55.56, abs=0.01)
    assert result[1].percentage == pytest.approx(33.33, abs=0.01)


def test_full_breakdown_sums_to_100(reference_time):
    events = generate_events(42, 30, 2000, reference_time=reference_time)
    for field in ('device', 'country', 'event_type'):
        result = breakdown_by(events, field)
        assert sum(e.count for e in result) == len(events)
        assert sum(e.percentage for e in result) == pytest.approx(100)


def test_ties_keep_first_seen_order(make_event):
    events = [make_event(country=c) for c in ['France', 'Germany', 'Japan', 'Germany', 'France']]
    result = breakdown_by(events, 'country')
    assert [e.value for e in result] == ['France', 'Germany', 'Japan']


def test_event_type_alias(make_event):
    events = [make_event('click'), make_event('click'), make_event('signup')]
    assert breakdown_by(events, 'eventType') == breakdown_by(events, 'event_type')
    assert breakdown_by(events, 'event_type')[0] == BreakdownEntry('click', 2, 2 / 3 * 100)


def test_empty_input():
    assert breakdown_by([], 'device') == []
    assert breakdown_by([], 'device', 3) == []


def test_top_zero(device_events):
    assert breakdown_by(device_events, 'device', 0) == []


def test_unknown_field(device_events):
    with pytest.raises(InvalidArgument):
        breakdown_by(device_events, 'browser')


def test_negative_top_n(device_events):
    with pytest.raises(InvalidArgument):
        breakdown_by(device_events, 'device', -1)
