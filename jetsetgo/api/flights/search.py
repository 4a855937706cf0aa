from flask import request, jsonify
import logging

from jetsetgo.services.amadeus import get_amadeus_service
from jetsetgo.utils.flight_format import summarize_offer
from jetsetgo.utils.validation import parse_bool
from jetsetgo.api.flights import flights_bp as bp
from .schemas import FlightSchemas
from .utils import handle_api_error

logger = logging.getLogger(__name__)

# ==================== SEARCH ENDPOINTS ====================

@bp.route('/locations', methods=['GET'])
@handle_api_error
def search_locations():
    """
    Search for cities and airports by keyword

    Query Params:
        keyword (str): Search term (min 2 chars)
        countryCode (str): optional ISO country filter
    """
    keyword = request.args.get('keyword', '').strip()

    if len(keyword) < 2:
        return jsonify({
            'success': True,
            'data': []
        }), 200

    amadeus = get_amadeus_service()
    locations = amadeus.search_locations(keyword, country_code=request.args.get('countryCode'))

    return jsonify({
        'success': True,
        'data': locations
    }), 200


@bp.route('/search', methods=['POST'])
@handle_api_error
def search_flights():
    """
    Search for flight offers

    Request Body:
    {
        "originLocationCode": "JFK",       // or "origin"
        "destinationLocationCode": "LAX",  // or "destination"
        "departureDate": "2025-03-15",
        "returnDate": "2025-03-20",  // optional
        "adults": 1,
        "children": 0,  // optional
        "infants": 0,  // optional
        "travelClass": "ECONOMY",  // optional
        "nonStop": false,  // optional
        "maxPrice": 1000,  // optional
        "currencyCode": "USD"  // optional, or "currency"
    }

    Query Params:
        summary (bool): attach a flattened summary to every offer
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({
            'success': False,
            'error': 'INVALID_PARAMETERS',
            'message': 'Invalid search parameters',
            'errors': {'body': 'Request body must be a JSON object'}
        }), 400

    missing = FlightSchemas.missing_fields(data)
    if missing:
        return jsonify({
            'success': False,
            'error': 'MISSING_FIELDS',
            'message': f'Missing required fields: {", ".join(missing)}'
        }), 400

    is_valid, errors, search_params = FlightSchemas.validate_search(data)
    if not is_valid:
        return jsonify({
            'success': False,
            'error': 'INVALID_PARAMETERS',
            'message': 'Invalid search parameters',
            'errors': errors
        }), 400

    amadeus = get_amadeus_service()
    results = amadeus.search_flight_offers(**search_params)

    offers = results.get('data', [])
    dictionaries = results.get('dictionaries', {})

    if parse_bool(request.args.get('summary')):
        for offer in offers:
            try:
                offer['summary'] = summarize_offer(offer, dictionaries)
            except ValueError as e:
                logger.warning(f"Skipping summary for offer {offer.get('id')}: {str(e)}")
                offer['summary'] = None

    return jsonify({
        'success': True,
        'data': offers,
        'meta': results.get('meta', {}),
        'dictionaries': dictionaries
    }), 200
