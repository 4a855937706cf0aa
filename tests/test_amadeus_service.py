import pytest
from datetime import datetime, timedelta
from unittest.mock import patch, MagicMock

import requests

from jetsetgo.services.amadeus import (
    AmadeusConfig, AmadeusEnvironment, AmadeusFlightService, AmadeusAPIError,
    AuthenticationError, ConfigurationError, RateLimitError, ValidationError,
    TravelClass, create_amadeus_service, get_amadeus_service, is_configured
)


def make_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.text = "{}" if payload is None else "payload"
    response.json.return_value = payload if payload is not None else {}
    return response


def token_response(token="fresh_token", expires_in=1799):
    return make_response(200, {
        "type": "amadeusOAuth2Token",
        "access_token": token,
        "expires_in": expires_in,
        "state": "approved"
    })


@pytest.fixture
def service():
    config = AmadeusConfig(
        client_id="test_id",
        client_secret="test_secret",
        environment=AmadeusEnvironment.TEST
    )
    return AmadeusFlightService(config)


@pytest.fixture
def authed_service(service):
    service._access_token = "fake_token"
    service._token_expiry = datetime.now() + timedelta(hours=1)
    return service


class TestTokenCache:

    def test_no_token_is_not_valid(self, service):
        assert service.has_valid_token() is False

    def test_first_call_authenticates(self, service):
        with patch.object(service._session, 'post', return_value=token_response()) as mock_post:
            assert service.get_access_token() == "fresh_token"

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        assert args[0] == "https://test.api.amadeus.com/v1/security/oauth2/token"
        assert kwargs['data'] == {
            "grant_type": "client_credentials",
            "client_id": "test_id",
            "client_secret": "test_secret"
        }
        assert kwargs['headers']['Content-Type'] == "application/x-www-form-urlencoded"

    def test_token_is_reused_while_valid(self, service):
        with patch.object(service._session, 'post', return_value=token_response()) as mock_post:
            first = service.get_access_token()
            second = service.get_access_token()

        assert first == second == "fresh_token"
        assert mock_post.call_count == 1

    def test_expiry_follows_expires_in(self, service):
        before = datetime.now()
        with patch.object(service._session, 'post', return_value=token_response(expires_in=600)):
            service.get_access_token()

        assert before + timedelta(seconds=599) <= service.token_expiry <= datetime.now() + timedelta(seconds=601)

    def test_missing_expires_in_uses_default_lifetime(self, service):
        response = make_response(200, {"access_token": "abc"})
        before = datetime.now()
        with patch.object(service._session, 'post', return_value=response):
            service.get_access_token()

        assert service.token_expiry >= before + timedelta(seconds=1798)

    def test_token_inside_buffer_is_refreshed(self, service):
        service._access_token = "old_token"
        service._token_expiry = datetime.now() + timedelta(seconds=200)

        with patch.object(service._session, 'post', return_value=token_response("new_token")) as mock_post:
            assert service.get_access_token() == "new_token"
        mock_post.assert_called_once()

    def test_validity_boundary(self, service):
        now = datetime(2025, 1, 1, 12, 0, 0)
        service._access_token = "token"
        service._token_expiry = now + timedelta(seconds=300)

        # valid strictly before expiry - buffer
        assert service.has_valid_token(now - timedelta(seconds=1)) is True
        assert service.has_valid_token(now) is False
        assert service.has_valid_token(now + timedelta(seconds=1)) is False

    def test_custom_buffer(self):
        service = AmadeusFlightService(AmadeusConfig("id", "secret", token_buffer=0))
        now = datetime(2025, 1, 1, 12, 0, 0)
        service._access_token = "token"
        service._token_expiry = now + timedelta(seconds=10)

        assert service.has_valid_token(now) is True

    def test_auth_failure_raises(self, service):
        response = make_response(401, {"error": "invalid_client"})
        with patch.object(service._session, 'post', return_value=response):
            with pytest.raises(AuthenticationError) as excinfo:
                service.get_access_token()

        assert excinfo.value.status_code == 401
        assert service.has_valid_token() is False

    def test_auth_network_failure_raises(self, service):
        with patch.object(service._session, 'post', side_effect=requests.exceptions.ConnectionError("down")):
            with pytest.raises(AuthenticationError):
                service.get_access_token()

    def test_auth_response_without_token_raises(self, service):
        with patch.object(service._session, 'post', return_value=make_response(200, {"expires_in": 1799})):
            with pytest.raises(AuthenticationError):
                service.get_access_token()

    def test_upstream_401_invalidates_token(self, authed_service):
        with patch.object(authed_service._session, 'get', return_value=make_response(401, {})):
            with pytest.raises(AuthenticationError):
                authed_service.search_flight_offers("JFK", "LHR", "2025-12-25")

        assert authed_service.has_valid_token() is False
        assert authed_service.token_expiry is None

    def test_next_call_after_401_reauthenticates(self, authed_service):
        with patch.object(authed_service._session, 'get', return_value=make_response(401, {})):
            with pytest.raises(AuthenticationError):
                authed_service.search_flight_offers("JFK", "LHR", "2025-12-25")

        ok = make_response(200, {"data": []})
        with patch.object(authed_service._session, 'post', return_value=token_response("second")) as mock_post, \
                patch.object(authed_service._session, 'get', return_value=ok) as mock_get:
            authed_service.search_flight_offers("JFK", "LHR", "2025-12-25")

        mock_post.assert_called_once()
        assert mock_get.call_args[1]['headers']['Authorization'] == "Bearer second"


class TestFlightOffersSearch:

    def test_search_flight_offers(self, authed_service):
        mock_response = make_response(200, {"data": [{"id": "1", "itineraries": []}]})

        with patch.object(authed_service._session, 'get', return_value=mock_response) as mock_get:
            result = authed_service.search_flight_offers(
                origin="jfk",
                destination="lhr",
                departure_date="2025-12-25"
            )

        assert len(result['data']) == 1
        args, kwargs = mock_get.call_args
        assert args[0] == "https://test.api.amadeus.com/v2/shopping/flight-offers"
        assert kwargs['params'] == {
            'originLocationCode': 'JFK',
            'destinationLocationCode': 'LHR',
            'departureDate': '2025-12-25',
            'adults': 1
        }
        assert kwargs['headers'] == {
            "Authorization": "Bearer fake_token",
            "Accept": "application/json"
        }

    def test_optional_params_are_forwarded(self, authed_service):
        with patch.object(authed_service._session, 'get', return_value=make_response(200, {"data": []})) as mock_get:
            authed_service.search_flight_offers(
                origin="JFK",
                destination="LAX",
                departure_date="2025-03-15",
                adults=2,
                return_date="2025-03-20",
                children=1,
                infants=1,
                travel_class=TravelClass.BUSINESS,
                non_stop=False,
                currency="usd",
                max_price=999.9,
                max_results=50
            )

        params = mock_get.call_args[1]['params']
        assert params['returnDate'] == "2025-03-20"
        assert params['children'] == 1
        assert params['infants'] == 1
        assert params['travelClass'] == "BUSINESS"
        assert params['nonStop'] == "false"
        assert params['currencyCode'] == "USD"
        assert params['maxPrice'] == 999
        assert params['max'] == 50

    def test_zero_children_and_infants_are_omitted(self, authed_service):
        with patch.object(authed_service._session, 'get', return_value=make_response(200, {"data": []})) as mock_get:
            authed_service.search_flight_offers("JFK", "LAX", "2025-03-15", children=0, infants=0)

        params = mock_get.call_args[1]['params']
        assert 'children' not in params
        assert 'infants' not in params
        assert 'nonStop' not in params

    def test_validation_error_message(self, authed_service):
        response = make_response(400, {
            "errors": [{"status": 400, "code": 425, "title": "INVALID DATE", "detail": "Date/Time is in the past"}]
        })

        with patch.object(authed_service._session, 'get', return_value=response):
            with pytest.raises(ValidationError) as excinfo:
                authed_service.search_flight_offers("JFK", "LHR", "2020-01-01")

        assert str(excinfo.value) == "INVALID DATE: Date/Time is in the past"
        assert excinfo.value.status_code == 400

    def test_rate_limit(self, authed_service):
        with patch.object(authed_service._session, 'get', return_value=make_response(429, {})):
            with pytest.raises(RateLimitError) as excinfo:
                authed_service.search_flight_offers("JFK", "LHR", "2025-12-25")
        assert excinfo.value.status_code == 429

    def test_server_error_keeps_status(self, authed_service):
        response = make_response(500, {"errors": [{"title": "SYSTEM ERROR HAS OCCURRED"}]})
        with patch.object(authed_service._session, 'get', return_value=response):
            with pytest.raises(AmadeusAPIError) as excinfo:
                authed_service.search_flight_offers("JFK", "LHR", "2025-12-25")

        assert excinfo.value.status_code == 500
        assert excinfo.value.message == "SYSTEM ERROR HAS OCCURRED"

    def test_network_error(self, authed_service):
        with patch.object(authed_service._session, 'get', side_effect=requests.exceptions.Timeout("slow")):
            with pytest.raises(AmadeusAPIError) as excinfo:
                authed_service.search_flight_offers("JFK", "LHR", "2025-12-25")
        assert excinfo.value.status_code is None


class TestLocationSearch:

    def test_locations_are_normalized_and_sorted(self, authed_service):
        response = make_response(200, {"data": [
            {"subType": "AIRPORT", "name": "GATWICK", "iataCode": "LGW",
             "address": {"cityName": "LONDON", "countryName": "UNITED KINGDOM"},
             "analytics": {"travelers": {"score": 27}}},
            {"subType": "AIRPORT", "name": "HEATHROW", "iataCode": "LHR",
             "address": {"cityName": "LONDON", "countryName": "UNITED KINGDOM"},
             "analytics": {"travelers": {"score": 45}}},
        ]})

        with patch.object(authed_service._session, 'get', return_value=response) as mock_get:
            locations = authed_service.search_locations("lon", country_code="gb")

        assert [loc['iataCode'] for loc in locations] == ["LHR", "LGW"]
        assert locations[0]['name'] == "Heathrow"
        assert locations[0]['city'] == "London"
        params = mock_get.call_args[1]['params']
        assert params['keyword'] == "lon"
        assert params['subType'] == "CITY,AIRPORT"
        assert params['countryCode'] == "GB"

    def test_location_errors_return_empty_list(self, authed_service):
        with patch.object(authed_service._session, 'get', return_value=make_response(500, {})):
            assert authed_service.search_locations("lon") == []


class TestServiceFactory:

    def test_missing_credentials(self):
        with pytest.raises(ConfigurationError):
            create_amadeus_service(None, "secret")

    def test_environment_selection(self):
        assert create_amadeus_service("id", "secret", "production").base_url == "https://api.amadeus.com"
        assert create_amadeus_service("id", "secret").base_url == "https://test.api.amadeus.com"

    def test_retry_adapter_only_when_enabled(self):
        plain = create_amadeus_service("id", "secret")
        retrying = create_amadeus_service("id", "secret", max_retries=3)

        assert plain._session.get_adapter("https://x").max_retries.total == 0
        assert retrying._session.get_adapter("https://x").max_retries.total == 3

    def test_app_service_is_shared(self, app):
        first = get_amadeus_service(app)
        second = get_amadeus_service(app)

        assert first is second
        assert app.extensions['amadeus'] is first
        assert is_configured(app) is True

    def test_close_releases_session(self, service):
        with patch.object(service._session, 'close') as mock_close:
            service.close()
        mock_close.assert_called_once()

    def test_app_service_closed_at_exit(self, app):
        with patch('jetsetgo.services.amadeus.atexit.register') as mock_register:
            service = get_amadeus_service(app)
            get_amadeus_service(app)

        mock_register.assert_called_once_with(service.close)
