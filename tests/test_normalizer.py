"""Tests for raw record normalization."""

from datetime import datetime, timezone

from pierwatch.ingestion import normalize_flight, normalize_flights
from pierwatch.models import FlightDirection


NOW = datetime(2025, 6, 1, 10, 0, tzinfo=timezone.utc)


def test_well_formed_record(raw_flight):
    record = normalize_flight(raw_flight())

    assert record.flight_name == 'KL1001'
    assert record.flight_number == 1001
    assert record.direction is FlightDirection.DEPARTURE
    assert record.states == ['SCH']
    assert record.aircraft_type.main == '73H'
    assert record.type_code == '73H'
    assert record.gate == 'D65'
    assert record.pier == 'D'
    assert record.destinations == ['LHR']
    assert record.operating_carrier == 'KL'


def test_empty_record_gets_defaults():
    record = normalize_flight({}, now=NOW)

    assert record.flight_name == ''
    assert record.flight_number == 0
    assert record.direction is FlightDirection.DEPARTURE
    assert record.schedule_datetime == ''
    assert record.estimated_off_block == ''
    assert record.states == []
    assert record.aircraft_type.main == ''
    assert record.aircraft_type.sub == ''
    assert record.destinations == []
    assert record.main_flight is None
    # Missing update time is stamped with the fetch time
    assert record.last_updated_at == NOW.isoformat()


def test_arrival_direction_and_full_names():
    assert normalize_flight({'flightDirection': 'A'}).direction is FlightDirection.ARRIVAL
    assert normalize_flight({'flightDirection': 'Arrival'}).direction is FlightDirection.ARRIVAL
    assert normalize_flight({'flightDirection': 'X'}).direction is FlightDirection.DEPARTURE


def test_scheduled_time_falls_back_through_alternate_fields():
    record = normalize_flight({'scheduledDateTime': '2025-06-01T09:00:00+02:00'})
    assert record.schedule_datetime == '2025-06-01T09:00:00+02:00'
    assert record.schedule_date == '2025-06-01'
    # Estimated off block defaults to the scheduled time
    assert record.estimated_off_block == '2025-06-01T09:00:00+02:00'

    record = normalize_flight({'scheduleDate': '2025-06-01'})
    assert record.schedule_datetime == '2025-06-01'


def test_alternate_nested_and_flat_field_names():
    record = normalize_flight({
        'flightStates': ['BRD'],
        'destinations': ['JFK', 'BOS'],
        'estimatedOffBlockTime': '2025-06-01T09:10:00+02:00',
        'updatedAt': '2025-06-01T07:00:00+02:00',
    })

    assert record.states == ['BRD']
    assert record.destinations == ['JFK', 'BOS']
    assert record.estimated_off_block == '2025-06-01T09:10:00+02:00'
    assert record.last_updated_at == '2025-06-01T07:00:00+02:00'


def test_bare_string_aircraft_type_is_unified():
    record = normalize_flight({'aircraftType': '789'})

    assert record.aircraft_type.main == '789'
    assert record.aircraft_type.sub == '789'


def test_unusable_aircraft_type_becomes_empty():
    record = normalize_flight({'aircraftType': 42})

    assert record.aircraft_type.main == ''
    assert record.type_code == ''


def test_flight_number_is_coerced():
    assert normalize_flight({'flightNumber': '1234'}).flight_number == 1234
    assert normalize_flight({'flightNumber': 'KL12'}).flight_number == 0
    assert normalize_flight({'flightNumber': None}).flight_number == 0


def test_batch_skips_non_object_records(raw_flight):
    records = normalize_flights([raw_flight(), 'garbage', None, raw_flight(flightNumber=2)], now=NOW)

    assert [r.flight_number for r in records] == [1001, 2]


def test_to_dict_uses_provider_field_names(raw_flight):
    data = normalize_flight(raw_flight()).to_dict()

    assert data['flightName'] == 'KL1001'
    assert data['flightDirection'] == 'D'
    assert data['aircraftType'] == {'iataMain': '73H', 'iataSub': '73H'}
    assert data['publicFlightState'] == {'flightStates': ['SCH']}
