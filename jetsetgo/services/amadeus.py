"""
Amadeus Flight API Service

Thin client for the Amadeus Self-Service APIs used by the JetSetGo server:
flight offers search and airport/city lookup.

Key Features:
- OAuth2 client-credentials authentication with a cached bearer token
- Token refresh ahead of expiry (configurable safety margin)
- Flight offers search (GET)
- Location search for airport/city autocomplete
- Error translation into a small exception hierarchy

The service keeps exactly one token and its expiry instant. There is no lock
around the refresh: two requests that see an expired token at the same time
both fetch a new one, and the last write wins.

API Documentation: https://developers.amadeus.com/self-service/category/flights
"""

import atexit
import logging
from typing import Dict, List, Optional, Any
from datetime import datetime, timedelta
from dataclasses import dataclass
from enum import Enum
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from flask import current_app


logger = logging.getLogger(__name__)

EXTENSION_KEY = 'amadeus'
DEFAULT_TOKEN_LIFETIME = 1799


class AmadeusEnvironment(Enum):
    """Amadeus API environment endpoints"""
    TEST = "https://test.api.amadeus.com"
    PRODUCTION = "https://api.amadeus.com"


class TravelClass(Enum):
    """Flight cabin travel classes"""
    ECONOMY = "ECONOMY"
    PREMIUM_ECONOMY = "PREMIUM_ECONOMY"
    BUSINESS = "BUSINESS"
    FIRST = "FIRST"


@dataclass
class AmadeusConfig:
    """Configuration for Amadeus API client"""
    client_id: str
    client_secret: str
    environment: AmadeusEnvironment = AmadeusEnvironment.TEST
    timeout: int = 30
    max_retries: int = 0
    token_buffer: int = 300  # Refresh token 5 minutes before expiry


class AmadeusAPIError(Exception):
    """Base exception for Amadeus API errors"""
    def __init__(self, message: str, status_code: Optional[int] = None,
                 response: Optional[Dict] = None):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


class ConfigurationError(AmadeusAPIError):
    """Raised when API credentials are missing"""
    pass


class AuthenticationError(AmadeusAPIError):
    """Raised when authentication fails"""
    pass


class RateLimitError(AmadeusAPIError):
    """Raised when rate limit is exceeded"""
    pass


class ValidationError(AmadeusAPIError):
    """Raised when request validation fails"""
    pass


class AmadeusFlightService:
    """
    Service for the Amadeus flight search APIs

    This service handles:
    - Access token caching and refresh
    - Flight Offers Search (GET)
    - Airport & City Search
    """

    def __init__(self, config: AmadeusConfig):
        """
        Initialize Amadeus Flight Service

        Args:
            config: AmadeusConfig object with API credentials
        """
        self.config = config
        self.base_url = config.environment.value
        self._access_token: Optional[str] = None
        self._token_expiry: Optional[datetime] = None
        self._session = self._create_session()

        logger.info(f"Initialized Amadeus service for {config.environment.name} environment")

    def _create_session(self) -> requests.Session:
        """
        Create a requests session, with a retry adapter when retries are enabled

        Returns:
            Configured requests.Session object
        """
        session = requests.Session()

        if self.config.max_retries > 0:
            retry_strategy = Retry(
                total=self.config.max_retries,
                backoff_factor=1,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET", "POST"]
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("https://", adapter)
            session.mount("http://", adapter)

        return session

    # ==================== TOKEN CACHE ====================

    @property
    def token_expiry(self) -> Optional[datetime]:
        return self._token_expiry

    def has_valid_token(self, now: Optional[datetime] = None) -> bool:
        """True while the cached token is usable, i.e. now < expiry - buffer"""
        if self._access_token is None or self._token_expiry is None:
            return False
        now = now or datetime.now()
        return now < self._token_expiry - timedelta(seconds=self.config.token_buffer)

    def invalidate_token(self) -> None:
        self._access_token = None
        self._token_expiry = None

    def _authenticate(self) -> None:
        """
        Authenticate with Amadeus API using OAuth2 Client Credentials flow

        Raises:
            AuthenticationError: If authentication fails
        """
        url = f"{self.base_url}/v1/security/oauth2/token"

        headers = {
            "Content-Type": "application/x-www-form-urlencoded"
        }

        data = {
            "grant_type": "client_credentials",
            "client_id": self.config.client_id,
            "client_secret": self.config.client_secret
        }

        try:
            logger.info("Authenticating with Amadeus API...")
            response = self._session.post(
                url,
                headers=headers,
                data=data,
                timeout=self.config.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Authentication request failed: {str(e)}")
            raise AuthenticationError(f"Authentication request failed: {str(e)}")

        if response.status_code != 200:
            error_msg = f"Authentication failed with status {response.status_code}"
            logger.error(error_msg)
            raise AuthenticationError(
                error_msg,
                status_code=response.status_code,
                response=self._safe_json(response)
            )

        token_data = self._safe_json(response)
        if not token_data.get("access_token"):
            raise AuthenticationError("Authentication response did not contain an access token",
                                      status_code=response.status_code, response=token_data)

        expires_in = int(token_data.get("expires_in", DEFAULT_TOKEN_LIFETIME))
        self._access_token = token_data["access_token"]
        self._token_expiry = datetime.now() + timedelta(seconds=expires_in)
        logger.info(f"Authentication successful. Token expires in {expires_in} seconds")

    def get_access_token(self) -> str:
        """Return the cached token, refreshing it first when it is missing or about to expire"""
        if not self.has_valid_token():
            self._authenticate()
        return self._access_token

    def _get_headers(self) -> Dict[str, str]:
        """
        Get headers with authentication token

        Returns:
            Dictionary of HTTP headers
        """
        return {
            "Authorization": f"Bearer {self.get_access_token()}",
            "Accept": "application/json"
        }

    # ==================== RESPONSE HANDLING ====================

    @staticmethod
    def _safe_json(response: requests.Response) -> Dict[str, Any]:
        try:
            data = response.json() if response.text else {}
        except ValueError:
            data = {}
        return data if isinstance(data, dict) else {}

    def _handle_response(self, response: requests.Response) -> Dict[str, Any]:
        """
        Handle API response and raise appropriate exceptions

        Args:
            response: requests.Response object

        Returns:
            Parsed JSON response

        Raises:
            Various AmadeusAPIError subclasses based on error type
        """
        response_data = self._safe_json(response)

        if response.status_code == 200:
            return response_data
        elif response.status_code == 400:
            error_msg = self._extract_error_message(response_data)
            logger.error(f"Validation error: {error_msg}")
            raise ValidationError(error_msg, response.status_code, response_data)
        elif response.status_code == 401:
            logger.error("Authentication failed, dropping cached token")
            self.invalidate_token()
            raise AuthenticationError("Authentication failed", response.status_code, response_data)
        elif response.status_code == 429:
            logger.warning("Rate limit exceeded")
            raise RateLimitError("Rate limit exceeded", response.status_code, response_data)
        elif response.status_code == 404:
            error_msg = "Resource not found"
            logger.error(error_msg)
            raise AmadeusAPIError(error_msg, response.status_code, response_data)
        else:
            error_msg = self._extract_error_message(response_data) or f"Request failed with status {response.status_code}"
            logger.error(f"API error: {error_msg}")
            raise AmadeusAPIError(error_msg, response.status_code, response_data)

    def _extract_error_message(self, response_data: Dict) -> str:
        """
        Extract error message from API response

        Args:
            response_data: API response dictionary

        Returns:
            Error message string
        """
        errors = response_data.get("errors")
        if isinstance(errors, list) and errors:
            error = errors[0]
            detail = error.get("detail", "")
            title = error.get("title", "")
            return f"{title}: {detail}" if title and detail else (detail or title or "Unknown error")
        return response_data.get("error_description", response_data.get("error", "Unknown error"))

    # ==================== LOCATION SEARCH ====================

    def search_locations(
        self,
        keyword: str,
        sub_type: Optional[List[str]] = None,
        country_code: Optional[str] = None,
        limit: int = 10
    ) -> List[Dict[str, Any]]:
        """
        Search for locations (cities, airports) by keyword.

        Failures are logged and yield an empty list, since this backs a
        type-ahead field.

        Args:
            keyword: Search keyword (e.g., "Lon")
            sub_type: List of location types to include
            country_code: Filter by country code
            limit: Maximum number of results

        Returns:
            List of normalized location dictionaries
        """
        url = f"{self.base_url}/v1/reference-data/locations"

        params = {
            "subType": ",".join(sub_type or ["CITY", "AIRPORT"]),
            "keyword": keyword,
            "page[limit]": limit,
            "view": "LIGHT"
        }

        if country_code:
            params["countryCode"] = country_code.upper()

        try:
            response = self._session.get(url, headers=self._get_headers(), params=params,
                                         timeout=self.config.timeout)
            if response.status_code == 404:
                return []
            data = self._handle_response(response)
            return self._normalize_locations(data.get("data", []))

        except AmadeusAPIError as e:
            logger.warning(f"Location search failed: {e.message}")
            return []
        except requests.exceptions.RequestException as e:
            logger.error(f"Location search network error: {str(e)}")
            return []

    def _normalize_locations(self, locations: List[Dict]) -> List[Dict[str, Any]]:
        """
        Normalize Amadeus location response to frontend-friendly format
        """
        normalized = []
        for loc in locations:
            if not isinstance(loc, dict):
                continue
            address = loc.get("address") or {}
            normalized.append({
                "type": loc.get("subType", "LOCATION"),
                "name": (loc.get("name") or "").title(),
                "iataCode": loc.get("iataCode", ""),
                "city": (address.get("cityName") or "").title(),
                "country": (address.get("countryName") or "").title(),
                "score": ((loc.get("analytics") or {}).get("travelers") or {}).get("score", 0)
            })

        return sorted(normalized, key=lambda x: x.get("score", 0), reverse=True)

    # ==================== FLIGHT OFFERS SEARCH ====================

    def search_flight_offers(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        adults: int = 1,
        return_date: Optional[str] = None,
        children: Optional[int] = None,
        infants: Optional[int] = None,
        travel_class: Optional[TravelClass] = None,
        non_stop: Optional[bool] = None,
        currency: Optional[str] = None,
        max_price: Optional[float] = None,
        max_results: Optional[int] = None
    ) -> Dict[str, Any]:
        """
        Search for flight offers using GET method (simple search)

        Args:
            origin: IATA code of origin airport (e.g., 'JFK')
            destination: IATA code of destination airport (e.g., 'LAX')
            departure_date: Departure date in YYYY-MM-DD format
            adults: Number of adult passengers (12+ years)
            return_date: Return date for round-trip in YYYY-MM-DD format
            children: Number of children (2-11 years)
            infants: Number of infants (under 2 years)
            travel_class: Cabin class preference
            non_stop: If True, only direct flights
            currency: Preferred currency code (e.g., 'USD')
            max_price: Maximum price per traveler
            max_results: Maximum number of flight offers to return

        Returns:
            Dictionary containing flight offers data

        Raises:
            ValidationError: If parameters are invalid
            AmadeusAPIError: If API request fails
        """
        url = f"{self.base_url}/v2/shopping/flight-offers"

        params = {
            "originLocationCode": origin.upper(),
            "destinationLocationCode": destination.upper(),
            "departureDate": departure_date,
            "adults": adults
        }

        # Optional parameters are only forwarded when set
        if return_date:
            params["returnDate"] = return_date
        if children:
            params["children"] = children
        if infants:
            params["infants"] = infants
        if travel_class:
            params["travelClass"] = travel_class.value
        if non_stop is not None:
            params["nonStop"] = str(non_stop).lower()
        if currency:
            params["currencyCode"] = currency.upper()
        if max_price is not None:
            params["maxPrice"] = int(max_price)
        if max_results is not None:
            params["max"] = max_results

        try:
            logger.info(f"Searching flights: {params['originLocationCode']} -> "
                        f"{params['destinationLocationCode']} on {departure_date}")
            response = self._session.get(
                url,
                headers=self._get_headers(),
                params=params,
                timeout=self.config.timeout
            )

            result = self._handle_response(response)
            logger.info(f"Found {len(result.get('data', []))} flight offers")
            return result

        except requests.exceptions.RequestException as e:
            logger.error(f"Flight search request failed: {str(e)}")
            raise AmadeusAPIError(f"Flight search request failed: {str(e)}")

    # ==================== UTILITY METHODS ====================

    def close(self) -> None:
        """Close the session and cleanup resources"""
        if self._session:
            self._session.close()
            logger.info("Amadeus service session closed")


# ==================== CONVENIENCE FUNCTIONS ====================

def create_amadeus_service(
    client_id: Optional[str],
    client_secret: Optional[str],
    environment: str = "test",
    timeout: int = 30,
    max_retries: int = 0,
    token_buffer: int = 300
) -> AmadeusFlightService:
    """
    Factory function to create AmadeusFlightService instance

    Args:
        client_id: Amadeus API key
        client_secret: Amadeus API secret
        environment: 'test' or 'production'

    Returns:
        Configured AmadeusFlightService instance

    Raises:
        ConfigurationError: If credentials are not provided
    """
    if not client_id or not client_secret:
        raise ConfigurationError(
            "Amadeus credentials not provided. "
            "Set AMADEUS_API_KEY and AMADEUS_API_SECRET environment variables."
        )

    env = AmadeusEnvironment.PRODUCTION if environment.lower() == "production" else AmadeusEnvironment.TEST

    config = AmadeusConfig(
        client_id=client_id,
        client_secret=client_secret,
        environment=env,
        timeout=timeout,
        max_retries=max_retries,
        token_buffer=token_buffer
    )

    return AmadeusFlightService(config)


def get_amadeus_service(app=None) -> AmadeusFlightService:
    """
    Return the application's shared service, creating it on first use.

    The instance lives in ``app.extensions`` so its token cache survives
    across requests. Its HTTP session is closed when the process exits.
    """
    app = app or current_app._get_current_object()
    service = app.extensions.get(EXTENSION_KEY)
    if service is None:
        service = create_amadeus_service(
            client_id=app.config.get('AMADEUS_API_KEY'),
            client_secret=app.config.get('AMADEUS_API_SECRET'),
            environment=app.config.get('AMADEUS_ENV', 'test'),
            timeout=app.config.get('AMADEUS_TIMEOUT', 30),
            max_retries=app.config.get('AMADEUS_MAX_RETRIES', 0),
            token_buffer=app.config.get('AMADEUS_TOKEN_BUFFER', 300)
        )
        app.extensions[EXTENSION_KEY] = service
        atexit.register(service.close)
    return service


def is_configured(app=None) -> bool:
    app = app or current_app
    return bool(app.config.get('AMADEUS_API_KEY') and app.config.get('AMADEUS_API_SECRET'))
