"""
Flight search request validation

Accepts the Amadeus parameter names the web client sends
(originLocationCode, destinationLocationCode, currencyCode, max) as well as
the short aliases (origin, destination, currency, maxResults).
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from jetsetgo.services.amadeus import TravelClass as AmadeusTravelClass
from jetsetgo.utils.validation import IATA_PATTERN, parse_whole_number, parse_bool
from .utils import map_travel_class

# canonical name -> accepted request keys, in priority order
FIELD_ALIASES = {
    'origin': ('originLocationCode', 'origin'),
    'destination': ('destinationLocationCode', 'destination'),
    'departureDate': ('departureDate',),
    'returnDate': ('returnDate',),
    'currency': ('currencyCode', 'currency'),
    'maxResults': ('max', 'maxResults'),
}

REQUIRED_FIELDS = ['origin', 'destination', 'departureDate']
MAX_PASSENGERS = 9


def _pick(data: Dict[str, Any], field: str) -> Any:
    for key in FIELD_ALIASES.get(field, (field,)):
        value = data.get(key)
        if value not in (None, ''):
            return value
    return None


def _valid_date(value: str) -> bool:
    try:
        datetime.strptime(value, '%Y-%m-%d')
        return True
    except (TypeError, ValueError):
        return False


class FlightSchemas:

    @staticmethod
    def missing_fields(data: Dict[str, Any]) -> List[str]:
        return [field for field in REQUIRED_FIELDS if _pick(data, field) is None]

    @staticmethod
    def validate_search(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """
        Validate a search request and build keyword arguments for
        AmadeusFlightService.search_flight_offers

        Returns:
            Tuple of (is_valid, errors, search_params)
        """
        errors = {}
        params = {}

        for field, key in (('origin', 'origin'), ('destination', 'destination')):
            code = str(_pick(data, field) or '').strip().upper()
            if not IATA_PATTERN.match(code):
                errors[field] = 'Must be a 3-letter IATA code'
            else:
                params[key] = code

        if params.get('origin') and params.get('origin') == params.get('destination'):
            errors['destination'] = 'Destination must differ from origin'

        departure_date = str(_pick(data, 'departureDate') or '').strip()
        return_date = _pick(data, 'returnDate')
        if not _valid_date(departure_date):
            errors['departureDate'] = 'Dates must be in YYYY-MM-DD format'
        else:
            params['departure_date'] = departure_date

        if return_date is not None:
            return_date = str(return_date).strip()
            if not _valid_date(return_date):
                errors['returnDate'] = 'Dates must be in YYYY-MM-DD format'
            elif 'departure_date' in params and return_date < params['departure_date']:
                errors['returnDate'] = 'Return date must not be before departure date'
            else:
                params['return_date'] = return_date

        counts = {}
        for key, default in (('adults', 1), ('children', 0), ('infants', 0)):
            raw = data.get(key)
            counts[key] = default if raw in (None, '') else parse_whole_number(raw)
            if counts[key] is None:
                errors[key] = 'Must be a whole number'
                counts[key] = default
        adults, children, infants = counts['adults'], counts['children'], counts['infants']

        if adults < 1:
            errors['adults'] = 'At least one adult is required'
        if children < 0:
            errors['children'] = 'Must not be negative'
        if infants < 0:
            errors['infants'] = 'Must not be negative'
        elif infants > adults:
            errors.setdefault('infants', 'Each infant must travel with an adult')
        if adults + children > MAX_PASSENGERS:
            errors.setdefault('adults', f'At most {MAX_PASSENGERS} seated passengers per search')
        params['adults'] = adults
        if children:
            params['children'] = children
        if infants:
            params['infants'] = infants

        if data.get('travelClass'):
            travel_class = map_travel_class(data['travelClass'])
            if travel_class is None:
                errors['travelClass'] = 'Must be one of: ' + ', '.join(c.value for c in AmadeusTravelClass)
            else:
                params['travel_class'] = travel_class

        non_stop = parse_bool(data.get('nonStop'))
        if non_stop is not None:
            params['non_stop'] = non_stop

        currency = _pick(data, 'currency')
        if currency:
            currency = str(currency).strip().upper()
            if len(currency) != 3 or not currency.isalpha():
                errors['currency'] = 'Must be a 3-letter currency code'
            else:
                params['currency'] = currency

        max_price = data.get('maxPrice')
        if max_price not in (None, ''):
            try:
                max_price = float(max_price)
                if max_price <= 0:
                    raise ValueError
                params['max_price'] = max_price
            except (TypeError, ValueError):
                errors['maxPrice'] = 'Must be a positive number'

        max_results = _pick(data, 'maxResults')
        if max_results is not None:
            max_results = parse_whole_number(max_results)
            if max_results is None or not 1 <= max_results <= 250:
                errors['maxResults'] = 'Must be between 1 and 250'
            else:
                params['max_results'] = max_results

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, params if is_valid else None
