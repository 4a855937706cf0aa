from functools import wraps
from flask import jsonify, current_app
import logging
from typing import Optional
from jetsetgo.services.amadeus import (
    AmadeusAPIError, ValidationError, RateLimitError, AuthenticationError,
    ConfigurationError, TravelClass as AmadeusTravelClass
)

logger = logging.getLogger(__name__)


def handle_api_error(f):
    """Decorator for consistent error handling"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except ValidationError as e:
            logger.warning(f"Validation error: {e.message}")
            return jsonify({
                'success': False,
                'error': 'VALIDATION_ERROR',
                'message': e.message,
                'details': e.response
            }), 400
        except RateLimitError:
            logger.warning("Rate limit exceeded")
            return jsonify({
                'success': False,
                'error': 'RATE_LIMIT_EXCEEDED',
                'message': 'Too many requests. Please try again later.',
                'retry_after': 60
            }), 429
        except ConfigurationError as e:
            logger.error(f"Flight search unavailable: {e.message}")
            return jsonify({
                'success': False,
                'error': 'SERVICE_UNAVAILABLE',
                'message': 'Flight search is not configured on this server.'
            }), 503
        except AuthenticationError as e:
            logger.error(f"Amadeus authentication error: {e.message}")
            return jsonify({
                'success': False,
                'error': 'UPSTREAM_AUTH_ERROR',
                'message': 'Unable to authenticate with the flight provider.',
                'technical_details': e.message if current_app.debug else None
            }), 502
        except AmadeusAPIError as e:
            logger.error(f"Amadeus API error: {e.message}")
            status_code = e.status_code if e.status_code and e.status_code >= 400 else 502
            return jsonify({
                'success': False,
                'error': 'API_ERROR',
                'message': 'Unable to process your request. Please try again.',
                'details': e.response,
                'technical_details': e.message if current_app.debug else None
            }), status_code
        except Exception:
            logger.exception("Unexpected error in API endpoint")
            return jsonify({
                'success': False,
                'error': 'INTERNAL_ERROR',
                'message': 'An unexpected error occurred. Please try again later.'
            }), 500
    return decorated_function


def map_travel_class(frontend_class: str) -> Optional[AmadeusTravelClass]:
    """Map frontend travel class to Amadeus enum; None when it is not a known cabin"""
    mapping = {
        'ECONOMY': AmadeusTravelClass.ECONOMY,
        'PREMIUM_ECONOMY': AmadeusTravelClass.PREMIUM_ECONOMY,
        'BUSINESS': AmadeusTravelClass.BUSINESS,
        'FIRST': AmadeusTravelClass.FIRST
    }
    return mapping.get(str(frontend_class).strip().upper().replace(' ', '_'))
