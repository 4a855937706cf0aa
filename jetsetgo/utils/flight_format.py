"""
Helpers that flatten Amadeus flight offers into display and booking fields
"""
import re
from typing import Any, Dict, Optional

from dateutil import parser

AIRPORT_CITIES = {
    'ICN': 'Seoul',
    'GMP': 'Seoul',
    'JFK': 'New York',
    'LGA': 'New York',
    'EWR': 'Newark',
    'LAX': 'Los Angeles',
    'SFO': 'San Francisco',
    'ORD': 'Chicago',
    'ATL': 'Atlanta',
    'MIA': 'Miami',
    'LHR': 'London',
    'LGW': 'London',
    'CDG': 'Paris',
    'FRA': 'Frankfurt',
    'AMS': 'Amsterdam',
    'MAD': 'Madrid',
    'DXB': 'Dubai',
    'HND': 'Tokyo',
    'NRT': 'Tokyo',
    'PEK': 'Beijing',
    'PVG': 'Shanghai',
    'SYD': 'Sydney',
    'HKG': 'Hong Kong',
    'SIN': 'Singapore',
    'BKK': 'Bangkok',
}

_DURATION_HOURS = re.compile(r'(\d+)H')
_DURATION_MINUTES = re.compile(r'(\d+)M')


def airport_city(iata_code: Optional[str]) -> str:
    """City for a known IATA code, otherwise the code itself"""
    if not iata_code:
        return ''
    return AIRPORT_CITIES.get(iata_code.upper(), iata_code.upper())


def format_duration(duration: Optional[str]) -> str:
    """ISO-8601 duration to short form, e.g. 'PT2H30M' -> '2h 30m'"""
    if not duration:
        return ''
    # Only look at the time part so 'P1DT2H' doesn't read the day as minutes
    time_part = duration.split('T', 1)[1] if 'T' in duration else duration
    hours = _DURATION_HOURS.search(time_part)
    minutes = _DURATION_MINUTES.search(time_part)

    parts = []
    if hours:
        parts.append(f"{int(hours.group(1))}h")
    if minutes:
        parts.append(f"{int(minutes.group(1))}m")
    return ' '.join(parts)


def format_date_time(value: Optional[str]) -> Dict[str, str]:
    """
    Split an offer timestamp into display date and time

    '2025-03-15T08:05:00' -> {'date': 'Mar 15', 'time': '08:05 AM'}
    """
    if not value:
        return {'date': '', 'time': ''}
    moment = parser.isoparse(value)
    return {
        'date': f"{moment.strftime('%b')} {moment.day}",
        'time': moment.strftime('%I:%M %p'),
    }


def _carrier_name(code: str, dictionaries: Optional[Dict[str, Any]]) -> str:
    carriers = (dictionaries or {}).get('carriers') or {}
    name = carriers.get(code)
    return name.title() if name else code


def summarize_offer(offer: Dict[str, Any], dictionaries: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Flatten the outbound itinerary of an offer.

    Only the first itinerary is summarized: departure comes from its first
    segment, arrival from its last.

    Raises:
        ValueError: If the offer has no itinerary segments
    """
    itineraries = offer.get('itineraries') or []
    if not itineraries or not itineraries[0].get('segments'):
        raise ValueError('Flight offer has no itinerary segments')

    itinerary = itineraries[0]
    segments = itinerary['segments']
    first, last = segments[0], segments[-1]

    departure = first.get('departure') or {}
    arrival = last.get('arrival') or {}
    departure_at = format_date_time(departure.get('at'))
    arrival_at = format_date_time(arrival.get('at'))

    carrier = first.get('carrierCode', '')
    price = offer.get('price') or {}
    total = price.get('grandTotal') or price.get('total')

    return {
        'offerId': offer.get('id'),
        'airline': _carrier_name(carrier, dictionaries),
        'flightNumber': f"{carrier}{first.get('number', '')}",
        'departureAirport': departure.get('iataCode', ''),
        'departureCity': airport_city(departure.get('iataCode')),
        'departureDate': departure_at['date'],
        'departureTime': departure_at['time'],
        'arrivalAirport': arrival.get('iataCode', ''),
        'arrivalCity': airport_city(arrival.get('iataCode')),
        'arrivalDate': arrival_at['date'],
        'arrivalTime': arrival_at['time'],
        'duration': format_duration(itinerary.get('duration')),
        'stops': len(segments) - 1,
        'price': float(total) if total is not None else None,
        'currency': price.get('currency'),
    }
