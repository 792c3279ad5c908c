"""
Aircraft reference data.

Static lookup tables keyed by IATA aircraft type code (the codes the
Schiphol feed publishes in aircraftType.iataSub / iataMain). Capacities,
descriptions and categories are keyed by exact code. Category falls back
to an ordered code prefix rule, and manufacturer is always resolved by
prefix; first match wins. Unrecognized codes resolve to
an explicit Unknown profile.

The tables are read-only mappings so aggregation code cannot modify them.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from pierwatch.models import AircraftCategory

logger = logging.getLogger(__name__)

UNKNOWN_MANUFACTURER = 'Unknown'


# Common IATA aircraft type codes
AIRCRAFT_TYPES: Mapping[str, str] = MappingProxyType({
    '221': 'Airbus A220-100',
    '223': 'Airbus A220-300',
    '319': 'Airbus A319',
    '320': 'Airbus A320',
    '310': 'Airbus A310',
    '321': 'Airbus A321',
    '32N': 'Airbus A320neo',
    '32Q': 'Airbus A321neo',
    '332': 'Airbus A330-200',
    '333': 'Airbus A330-300',
    '339': 'Airbus A330-900neo',
    '359': 'Airbus A350-900',
    '351': 'Airbus A350-1000',
    '388': 'Airbus A380-800',
    '73H': 'Boeing 737-800 (winglets)',
    '73W': 'Boeing 737-700 (winglets)',
    '73J': 'Boeing 737-900 (winglets)',
    '737': 'Boeing 737',
    '738': 'Boeing 737-800',
    '739': 'Boeing 737-900',
    '7M8': 'Boeing 737 MAX 8',
    '7M9': 'Boeing 737 MAX 9',
    '744': 'Boeing 747-400',
    '74N': 'Boeing 747-8F',
    '74Y': 'Boeing 747-400F',
    '752': 'Boeing 757-200',
    '763': 'Boeing 767-300',
    '772': 'Boeing 777-200',
    '773': 'Boeing 777-300',
    '77W': 'Boeing 777-300ER',
    '788': 'Boeing 787-8',
    '789': 'Boeing 787-9',
    '781': 'Boeing 787-10',
    'E70': 'Embraer E170',
    'E75': 'Embraer E175',
    'E7W': 'Embraer E175 (winglets)',
    'E90': 'Embraer E190',
    'E95': 'Embraer E195',
    '290': 'Embraer E190-E2',
    '295': 'Embraer E195-E2',
    'CR9': 'Bombardier CRJ-900',
    'AT7': 'ATR 72',
    'DH4': 'Dash 8-400',
})


# Typical seat counts per exact type code
AIRCRAFT_CAPACITY: Mapping[str, int] = MappingProxyType({
    '221': 115,
    '223': 140,
    '319': 144,
    '320': 180,
    '310': 220,
    '321': 220,
    '32N': 186,
    '32Q': 232,
    '332': 268,
    '333': 292,
    '339': 287,
    '359': 325,
    '351': 369,
    '388': 516,
    '73H': 186,
    '73W': 142,
    '73J': 178,
    '737': 149,
    '738': 186,
    '739': 189,
    '7M8': 178,
    '7M9': 193,
    '744': 408,
    '752': 200,
    '763': 269,
    '772': 318,
    '773': 368,
    '77W': 408,
    '788': 242,
    '789': 294,
    '781': 344,
    'E70': 76,
    'E75': 88,
    'E7W': 88,
    'E90': 100,
    'E95': 120,
    '290': 100,
    '295': 132,
    'CR9': 90,
    'AT7': 70,
    'DH4': 78,
})


# Exact-code categories, checked before the prefix rules
AIRCRAFT_CATEGORY: Mapping[str, AircraftCategory] = MappingProxyType({
    '221': AircraftCategory.NARROW_BODY,
    '223': AircraftCategory.NARROW_BODY,
    '310': AircraftCategory.WIDE_BODY,
    '313': AircraftCategory.WIDE_BODY,
    '343': AircraftCategory.WIDE_BODY,
    '346': AircraftCategory.WIDE_BODY,
    '73H': AircraftCategory.NARROW_BODY,
    '752': AircraftCategory.NARROW_BODY,
    '753': AircraftCategory.NARROW_BODY,
    '77W': AircraftCategory.WIDE_BODY,
    '295': AircraftCategory.REGIONAL,
    'E90': AircraftCategory.REGIONAL,
})


# Ordered prefix rules, first match wins
CATEGORY_PREFIXES: Tuple[Tuple[str, AircraftCategory], ...] = (
    ('22', AircraftCategory.NARROW_BODY),
    ('31', AircraftCategory.NARROW_BODY),
    ('32', AircraftCategory.NARROW_BODY),
    ('73', AircraftCategory.NARROW_BODY),
    ('7M', AircraftCategory.NARROW_BODY),
    ('33', AircraftCategory.WIDE_BODY),
    ('35', AircraftCategory.WIDE_BODY),
    ('38', AircraftCategory.WIDE_BODY),
    ('74', AircraftCategory.WIDE_BODY),
    ('76', AircraftCategory.WIDE_BODY),
    ('77', AircraftCategory.WIDE_BODY),
    ('78', AircraftCategory.WIDE_BODY),
    ('29', AircraftCategory.REGIONAL),
    ('E', AircraftCategory.REGIONAL),
    ('CR', AircraftCategory.REGIONAL),
    ('AT', AircraftCategory.REGIONAL),
    ('DH', AircraftCategory.REGIONAL),
)

MANUFACTURER_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ('29', 'Embraer'),
    ('E', 'Embraer'),
    ('2', 'Airbus'),
    ('3', 'Airbus'),
    ('7', 'Boeing'),
    ('CR', 'Bombardier'),
    ('AT', 'ATR'),
    ('DH', 'De Havilland Canada'),
)


@dataclass(frozen=True)
class AircraftProfile:
    """Reference data resolved for one aircraft type code."""
    category: AircraftCategory
    manufacturer: str
    capacity: int
    description: Optional[str] = None


UNKNOWN_PROFILE = AircraftProfile(
    category=AircraftCategory.UNKNOWN,
    manufacturer=UNKNOWN_MANUFACTURER,
    capacity=0,
)


def _match_prefix(code: str, rules):
    for prefix, value in rules:
        if code.startswith(prefix):
            return value
    return None


def resolve_aircraft(type_code: Optional[str]) -> AircraftProfile:
    """
    Look up category, manufacturer and capacity for an IATA type code.

    Returns UNKNOWN_PROFILE when the code matches no rule at all.
    """
    if not type_code:
        return UNKNOWN_PROFILE
    code = type_code.strip().upper()

    category = AIRCRAFT_CATEGORY.get(code) or _match_prefix(code, CATEGORY_PREFIXES)
    manufacturer = _match_prefix(code, MANUFACTURER_PREFIXES)
    if category is None and manufacturer is None:
        logger.debug(f'No aircraft reference data for type {code}')
        return UNKNOWN_PROFILE

    return AircraftProfile(
        category=category or AircraftCategory.UNKNOWN,
        manufacturer=manufacturer or UNKNOWN_MANUFACTURER,
        capacity=AIRCRAFT_CAPACITY.get(code, 0),
        description=AIRCRAFT_TYPES.get(code),
    )
