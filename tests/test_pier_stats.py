"""Tests for pier grouping, utilization and hourly density."""

import logging

import pytest

from pierwatch.analytics import aggregate, compute_hourly_density, compute_pier_statistics, derive_pier_key, peak_hour
from pierwatch.analytics.pier_stats import gate_number, utilization_percent, utilization_status
from pierwatch.ingestion import normalize_flight
from pierwatch.models import PierStatus, SchengenType


@pytest.mark.parametrize('pier, gate, expected_key, expected_type', [
    ('D', 'D62', 'D-Schengen', SchengenType.SCHENGEN),
    ('D', 'D59', 'D-Schengen', SchengenType.SCHENGEN),
    ('D', 'D87', 'D-Schengen', SchengenType.SCHENGEN),
    ('D', 'D40', 'D-NonSchengen', SchengenType.NON_SCHENGEN),
    ('D', 'D1', 'D-NonSchengen', SchengenType.NON_SCHENGEN),
    ('D', 'D57', 'D-NonSchengen', SchengenType.NON_SCHENGEN),
    ('D', 'D58', 'D', SchengenType.SCHENGEN),
    ('D', 'D99', 'D', SchengenType.SCHENGEN),
    ('D', 'DX', 'D', SchengenType.SCHENGEN),
    ('D', '', 'D', SchengenType.NON_SCHENGEN),
    ('B', 'B12', 'B', SchengenType.SCHENGEN),
    ('C', 'C5', 'C', SchengenType.SCHENGEN),
    ('E', 'E18', 'E', SchengenType.NON_SCHENGEN),
    ('F', 'F4', 'F', SchengenType.NON_SCHENGEN),
])
def test_derive_pier_key(pier, gate, expected_key, expected_type):
    assert derive_pier_key(pier, gate) == (expected_key, expected_type)


def test_flight_without_pier_has_no_key():
    key, _ = derive_pier_key('', 'D62')
    assert key is None


def test_d_flight_without_gate_is_grouped_as_non_schengen(raw_flight):
    result = aggregate([normalize_flight(raw_flight(gate=''))])

    (stat,) = result.pier_stats
    assert stat.pier == 'D'
    assert stat.type is SchengenType.NON_SCHENGEN


def test_gate_number_joins_all_digits():
    assert gate_number('D62') == 62
    assert gate_number('D7A') == 7
    assert gate_number('H') is None


def test_utilization_and_status_thresholds():
    assert utilization_percent(25, 100) == 25
    assert utilization_status(25) is PierStatus.HIGH
    assert utilization_status(21) is PierStatus.HIGH
    assert utilization_status(20) is PierStatus.MEDIUM
    assert utilization_status(11) is PierStatus.MEDIUM
    assert utilization_status(10) is PierStatus.LOW
    assert utilization_percent(1, 8) == 13  # 12.5 rounds half up
    assert utilization_percent(0, 0) == 0


def test_25_of_100_flights_is_high_utilization(raw_flight):
    flights = [normalize_flight(raw_flight(flightNumber=n, pier='B', gate='B1')) for n in range(25)]
    flights += [normalize_flight(raw_flight(flightNumber=100 + n, pier='E', gate='E1')) for n in range(75)]

    stats = {s.pier: s for s in compute_pier_statistics(flights)}

    assert stats['B'].utilization == 25
    assert stats['B'].status is PierStatus.HIGH
    assert stats['E'].utilization == 75


def test_arrivals_and_departures_counted_separately(raw_flight):
    flights = [
        normalize_flight(raw_flight(flightNumber=1, pier='C', gate='C4', flightDirection='A')),
        normalize_flight(raw_flight(flightNumber=2, pier='C', gate='C4', flightDirection='D')),
        normalize_flight(raw_flight(flightNumber=3, pier='C', gate='C4', flightDirection='D')),
    ]

    (stat,) = compute_pier_statistics(flights)

    assert (stat.flights, stat.arrivals, stat.departures) == (3, 1, 2)


def test_flights_without_pier_count_towards_total(raw_flight):
    flights = [
        normalize_flight(raw_flight(flightNumber=1, pier='B', gate='B1')),
        normalize_flight(raw_flight(flightNumber=2, pier='', gate='')),
    ]

    (stat,) = compute_pier_statistics(flights)

    assert stat.pier == 'B'
    assert stat.utilization == 50


class TestHourlyDensity:

    def test_two_flights_in_one_hour(self, raw_flight):
        flights = [
            normalize_flight(raw_flight(flightNumber=1, scheduleDateTime='2025-06-01T08:05:00+02:00')),
            normalize_flight(raw_flight(flightNumber=2, scheduleDateTime='2025-06-01T08:50:00+02:00')),
        ]

        buckets = compute_hourly_density(flights, 'D-Schengen')

        assert len(buckets) == 18
        assert buckets[0].hour == '06:00'
        assert buckets[-1].hour == '23:00'
        by_hour = {b.hour: b for b in buckets}
        assert by_hour['08:00'].flights == 2
        assert by_hour['08:00'].intensity == 1.0
        assert all(b.intensity == 0 for b in buckets if b.hour != '08:00')

    def test_intensity_is_relative_to_busiest_hour(self, raw_flight):
        times = ['07:10', '07:20', '07:30', '07:40', '12:00', '12:30']
        flights = [
            normalize_flight(raw_flight(flightNumber=i, scheduleDateTime=f'2025-06-01T{t}:00+02:00'))
            for i, t in enumerate(times)
        ]

        by_hour = {b.hour: b for b in compute_hourly_density(flights, 'D-Schengen')}

        assert by_hour['07:00'].intensity == 1.0
        assert by_hour['12:00'].intensity == 0.5

    def test_only_the_requested_pier_is_counted(self, raw_flight):
        flights = [
            normalize_flight(raw_flight(flightNumber=1, gate='D62')),
            normalize_flight(raw_flight(flightNumber=2, gate='D40')),
        ]

        buckets = compute_hourly_density(flights, 'D-NonSchengen')

        assert sum(b.flights for b in buckets) == 1

    def test_empty_pier_has_zero_intensity_everywhere(self):
        buckets = compute_hourly_density([], 'B')

        assert all(b.flights == 0 and b.intensity == 0 for b in buckets)
        assert peak_hour(buckets) is None

    def test_unparseable_time_is_skipped_and_logged(self, raw_flight, caplog):
        flights = [
            normalize_flight(raw_flight(flightNumber=1, scheduleDateTime='tomorrow-ish')),
            normalize_flight(raw_flight(flightNumber=2)),
        ]

        with caplog.at_level(logging.WARNING):
            buckets = compute_hourly_density(flights, 'D-Schengen')

        assert sum(b.flights for b in buckets) == 1
        assert 'tomorrow-ish' in caplog.text

    def test_hours_outside_the_chart_are_ignored(self, raw_flight):
        flights = [normalize_flight(raw_flight(scheduleDateTime='2025-06-01T03:00:00+02:00'))]

        assert sum(b.flights for b in compute_hourly_density(flights, 'D-Schengen')) == 0

    def test_hour_is_taken_in_the_airport_timezone(self, raw_flight):
        flights = [normalize_flight(raw_flight(scheduleDateTime='2025-06-01T06:15:00Z'))]

        by_hour = {b.hour: b for b in compute_hourly_density(flights, 'D-Schengen')}

        assert by_hour['08:00'].flights == 1

    def test_peak_hour_prefers_earliest_on_ties(self, raw_flight):
        flights = [
            normalize_flight(raw_flight(flightNumber=1, scheduleDateTime='2025-06-01T09:00:00+02:00')),
            normalize_flight(raw_flight(flightNumber=2, scheduleDateTime='2025-06-01T15:00:00+02:00')),
        ]

        assert peak_hour(compute_hourly_density(flights, 'D-Schengen')).hour == '09:00'


def test_end_to_end_pier_aggregation(raw_flight):
    flights = [normalize_flight(raw_flight(flightNumber=n, pier='D', gate='D65')) for n in (1, 2, 3)]
    flights += [normalize_flight(raw_flight(flightNumber=n, pier='B', gate='B12')) for n in (4, 5)]

    result = aggregate(flights)

    assert result.total_flights == 5
    d_stat, b_stat = result.pier_stats
    assert (d_stat.pier, d_stat.flights, d_stat.utilization) == ('D-Schengen', 3, 60)
    assert d_stat.status is PierStatus.HIGH
    assert (b_stat.pier, b_stat.flights, b_stat.utilization) == ('B', 2, 40)
    # 40 is above the 20 percent threshold
    assert b_stat.status is PierStatus.HIGH
    assert set(result.hourly_density) == {'D-Schengen', 'B'}
    assert result.hourly_density['D-Schengen'][2].flights == 3
