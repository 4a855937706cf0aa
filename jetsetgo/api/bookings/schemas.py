from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Tuple

from jetsetgo.models.booking import SNAPSHOT_FIELDS
from jetsetgo.models.enums import BookingStatus, TravelClass
from jetsetgo.utils.flight_format import summarize_offer
from jetsetgo.utils.validation import parse_whole_number

MAX_PASSENGERS = 9
SNAPSHOT_MAX_LENGTH = {
    'departure_airport': 10,
    'arrival_airport': 10,
    'flight_number': 20,
    'departure_date': 20,
    'departure_time': 20,
    'arrival_date': 20,
    'arrival_time': 20,
    'duration': 20,
}


def _parse_travel_class(value: Any) -> Optional[TravelClass]:
    try:
        return TravelClass[str(value).strip().upper().replace(' ', '_')]
    except KeyError:
        return None


def _parse_price(value: Any) -> Optional[Decimal]:
    if value is None or value == '' or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value)).quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError):
        return None
    return price if price.is_finite() else None


class BookingSchemas:
    """Validation schemas for booking endpoints"""

    @staticmethod
    def validate_create(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """
        Validate a new booking.

        The flight snapshot comes either from ``flightDetails`` or is derived
        from a raw ``flightOffer``; an explicit ``price`` wins over the
        offer's total.

        Returns:
            Tuple of (is_valid, errors, cleaned_data) where cleaned_data maps
            directly onto Booking columns
        """
        errors = {}
        cleaned_data = {}

        offer = data.get('flightOffer')
        details = data.get('flightDetails')
        derived_price = None
        derived_currency = None

        if offer is not None:
            if not isinstance(offer, dict):
                errors['flightOffer'] = 'Flight offer must be an object'
            else:
                try:
                    summary = summarize_offer(offer, data.get('dictionaries'))
                    details = {key: summary.get(key) for key in SNAPSHOT_FIELDS}
                    derived_price = summary.get('price')
                    derived_currency = summary.get('currency')
                except (ValueError, TypeError, AttributeError) as e:
                    errors['flightOffer'] = f'Invalid flight offer: {str(e)}'
        elif details is None:
            errors['flightDetails'] = 'Either flightDetails or flightOffer is required'
        elif not isinstance(details, dict):
            errors['flightDetails'] = 'Flight details must be an object'

        if isinstance(details, dict) and 'flightOffer' not in errors:
            for key, column in SNAPSHOT_FIELDS.items():
                value = details.get(key)
                value = str(value).strip() if value is not None else None
                max_length = SNAPSHOT_MAX_LENGTH.get(column, 100)
                if value and len(value) > max_length:
                    errors[f'flightDetails.{key}'] = f'Must be at most {max_length} characters'
                else:
                    cleaned_data[column] = value or None
            for column in ('departure_airport', 'arrival_airport'):
                if cleaned_data.get(column):
                    cleaned_data[column] = cleaned_data[column].upper()
            if not cleaned_data.get('departure_airport') or not cleaned_data.get('arrival_airport'):
                errors['flightDetails'] = 'Departure and arrival airports are required'

        raw_price = data.get('price', derived_price)
        price = _parse_price(raw_price)
        if raw_price is None:
            errors['price'] = 'Price is required'
        elif price is None or price <= 0:
            errors['price'] = 'Price must be a positive number'
        else:
            cleaned_data['price'] = price

        currency = str(data.get('currency') or derived_currency or 'USD').strip().upper()
        if len(currency) != 3 or not currency.isalpha():
            errors['currency'] = 'Must be a 3-letter currency code'
        else:
            cleaned_data['currency'] = currency

        raw_passengers = data.get('passengers')
        passengers = 1 if raw_passengers in (None, '') else parse_whole_number(raw_passengers)
        if passengers is None or not 1 <= passengers <= MAX_PASSENGERS:
            errors['passengers'] = f'Passengers must be between 1 and {MAX_PASSENGERS}'
        else:
            cleaned_data['passengers'] = passengers

        travel_class = _parse_travel_class(data.get('travelClass') or TravelClass.ECONOMY.value)
        if travel_class is None:
            errors['travelClass'] = 'Invalid travel class'
        else:
            cleaned_data['travel_class'] = travel_class

        payment_method = str(data.get('paymentMethod') or 'Credit Card').strip()
        if len(payment_method) > 50:
            errors['paymentMethod'] = 'Must be at most 50 characters'
        else:
            cleaned_data['payment_method'] = payment_method

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, cleaned_data if is_valid else None

    @staticmethod
    def validate_update(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """Partial update: passengers, travelClass, paymentMethod, status"""
        errors = {}
        cleaned_data = {}

        if 'passengers' in data:
            passengers = parse_whole_number(data.get('passengers'))
            if passengers is None or not 1 <= passengers <= MAX_PASSENGERS:
                errors['passengers'] = f'Passengers must be between 1 and {MAX_PASSENGERS}'
            else:
                cleaned_data['passengers'] = passengers

        if 'travelClass' in data:
            travel_class = _parse_travel_class(data.get('travelClass'))
            if travel_class is None:
                errors['travelClass'] = 'Invalid travel class'
            else:
                cleaned_data['travel_class'] = travel_class

        if 'paymentMethod' in data:
            payment_method = str(data.get('paymentMethod') or '').strip()
            if not payment_method or len(payment_method) > 50:
                errors['paymentMethod'] = 'Must be between 1 and 50 characters'
            else:
                cleaned_data['payment_method'] = payment_method

        if 'status' in data:
            try:
                cleaned_data['status'] = BookingStatus(str(data.get('status')).strip().lower())
            except ValueError:
                errors['status'] = 'Status must be one of: ' + ', '.join(s.value for s in BookingStatus)

        if not errors and not cleaned_data:
            errors['body'] = 'No updatable fields provided'

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, cleaned_data if is_valid else None
