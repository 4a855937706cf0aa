import json
import pytest

from jetsetgo.models import Booking, AuditLog
from jetsetgo.models.booking import REFERENCE_ALPHABET, REFERENCE_LENGTH
from jetsetgo.models.enums import BookingStatus, TravelClass
from conftest import auth_headers_for

FLIGHT_DETAILS = {
    'airline': 'Korean Air',
    'flightNumber': 'KE081',
    'departureCity': 'Seoul',
    'departureAirport': 'icn',
    'departureDate': 'Mar 15',
    'departureTime': '08:05 AM',
    'arrivalCity': 'New York',
    'arrivalAirport': 'JFK',
    'arrivalDate': 'Mar 15',
    'arrivalTime': '11:35 AM',
    'duration': '15h 30m',
}


@pytest.fixture
def booking(db, sample_user):
    booking = Booking(
        user_id=sample_user.id,
        airline='Korean Air',
        flight_number='KE081',
        departure_airport='ICN',
        arrival_airport='JFK',
        price=1250,
        passengers=1,
        travel_class=TravelClass.ECONOMY,
        status=BookingStatus.CONFIRMED
    )
    db.session.add(booking)
    db.session.commit()
    return booking


class TestBookingModel:

    def test_reference_generated(self, app):
        booking = Booking(user_id='u1', price=10)

        assert len(booking.booking_reference) == REFERENCE_LENGTH
        assert all(c in REFERENCE_ALPHABET for c in booking.booking_reference)

    def test_transitions(self, app):
        booking = Booking(user_id='u1', price=10, status=BookingStatus.CONFIRMED)

        assert booking.can_transition_to(BookingStatus.CANCELLED)
        assert booking.can_transition_to(BookingStatus.COMPLETED)
        assert not booking.can_transition_to(BookingStatus.CONFIRMED)

        booking.cancel()
        assert booking.status == BookingStatus.CANCELLED
        assert booking.cancelled_at is not None
        assert not booking.can_transition_to(BookingStatus.COMPLETED)


class TestCreateBooking:

    def test_create_from_flight_details(self, client, auth_headers, sample_user):
        response = client.post('/api/bookings', headers=auth_headers, json={
            'flightDetails': FLIGHT_DETAILS,
            'price': 1250.5,
            'passengers': 2,
            'travelClass': 'business'
        })

        assert response.status_code == 201
        booking = json.loads(response.data)['data']['booking']
        assert booking['userId'] == sample_user.id
        assert booking['status'] == 'confirmed'
        assert booking['price'] == 1250.5
        assert booking['currency'] == 'USD'
        assert booking['passengers'] == 2
        assert booking['travelClass'] == 'BUSINESS'
        assert booking['paymentMethod'] == 'Credit Card'
        assert booking['flightDetails']['departureAirport'] == 'ICN'
        assert len(booking['bookingReference']) == 6
        assert AuditLog.query.filter_by(action='booking_created').count() == 1

    def test_create_from_flight_offer(self, client, auth_headers, flight_offer):
        response = client.post('/api/bookings', headers=auth_headers, json={
            'flightOffer': flight_offer,
            'dictionaries': {'carriers': {'KE': 'KOREAN AIR'}}
        })

        assert response.status_code == 201
        booking = json.loads(response.data)['data']['booking']
        assert booking['price'] == 1250.0
        assert booking['flightDetails']['airline'] == 'Korean Air'
        assert booking['flightDetails']['arrivalAirport'] == 'JFK'
        assert booking['flightDetails']['duration'] == '15h 30m'

    def test_explicit_price_overrides_offer(self, client, auth_headers, flight_offer):
        response = client.post('/api/bookings', headers=auth_headers, json={
            'flightOffer': flight_offer,
            'price': 999
        })
        assert json.loads(response.data)['data']['booking']['price'] == 999.0

    def test_create_requires_auth(self, client):
        response = client.post('/api/bookings', json={'flightDetails': FLIGHT_DETAILS, 'price': 10})
        assert response.status_code == 401

    @pytest.mark.parametrize('body,field', [
        ({'price': 100}, 'flightDetails'),
        ({'flightDetails': {'airline': 'X'}, 'price': 100}, 'flightDetails'),
        ({'flightDetails': FLIGHT_DETAILS}, 'price'),
        ({'flightDetails': FLIGHT_DETAILS, 'price': -1}, 'price'),
        ({'flightDetails': FLIGHT_DETAILS, 'price': 100, 'passengers': 10}, 'passengers'),
        ({'flightDetails': FLIGHT_DETAILS, 'price': 100, 'passengers': 'two'}, 'passengers'),
        ({'flightDetails': FLIGHT_DETAILS, 'price': 100, 'passengers': 1.5}, 'passengers'),
        ({'flightDetails': FLIGHT_DETAILS, 'price': 100, 'travelClass': 'CARGO'}, 'travelClass'),
        ({'flightOffer': {'id': '1', 'itineraries': []}}, 'flightOffer'),
    ])
    def test_create_validation(self, client, auth_headers, body, field):
        response = client.post('/api/bookings', headers=auth_headers, json=body)

        assert response.status_code == 422
        assert field in json.loads(response.data)['errors']

    def test_create_non_object_body(self, client, auth_headers):
        response = client.post('/api/bookings', headers=auth_headers, json=[1, 2])

        assert response.status_code == 422
        assert 'body' in json.loads(response.data)['errors']
        assert Booking.query.count() == 0


class TestReadBookings:

    def test_list_own_bookings(self, client, db, auth_headers, booking, other_user):
        db.session.add(Booking(user_id=other_user.id, price=50, departure_airport='LHR', arrival_airport='CDG'))
        db.session.commit()

        response = client.get('/api/bookings', headers=auth_headers)

        assert response.status_code == 200
        data = json.loads(response.data)['data']
        assert [b['id'] for b in data['bookings']] == [booking.id]
        assert data['pagination'] == {'total': 1, 'page': 1, 'limit': 10, 'pages': 1}

    def test_list_status_filter(self, client, auth_headers, booking):
        response = client.get('/api/bookings?status=cancelled', headers=auth_headers)
        assert json.loads(response.data)['data']['bookings'] == []

        response = client.get('/api/bookings?status=unknown', headers=auth_headers)
        assert response.status_code == 422

    def test_list_all_admin_only(self, client, auth_headers, admin_headers, booking):
        assert client.get('/api/bookings?all=true', headers=auth_headers).status_code == 403

        response = client.get('/api/bookings?all=true', headers=admin_headers)
        assert response.status_code == 200
        assert json.loads(response.data)['data']['pagination']['total'] == 1

    def test_get_booking(self, client, auth_headers, booking):
        response = client.get(f'/api/bookings/{booking.id}', headers=auth_headers)

        assert response.status_code == 200
        assert json.loads(response.data)['data']['booking']['bookingReference'] == booking.booking_reference

    def test_get_by_reference_is_case_insensitive(self, client, auth_headers, booking):
        response = client.get(f'/api/bookings/reference/{booking.booking_reference.lower()}', headers=auth_headers)
        assert response.status_code == 200

    def test_other_users_booking_is_hidden(self, client, other_user, booking):
        response = client.get(f'/api/bookings/{booking.id}', headers=auth_headers_for(other_user))
        assert response.status_code == 404

    def test_admin_sees_any_booking(self, client, admin_headers, booking):
        assert client.get(f'/api/bookings/{booking.id}', headers=admin_headers).status_code == 200


class TestUpdateBooking:

    def test_update_details(self, client, auth_headers, booking):
        response = client.patch(f'/api/bookings/{booking.id}', headers=auth_headers, json={
            'passengers': 3,
            'travelClass': 'FIRST',
            'paymentMethod': 'PayPal'
        })

        assert response.status_code == 200
        data = json.loads(response.data)['data']['booking']
        assert data['passengers'] == 3
        assert data['travelClass'] == 'FIRST'
        assert data['paymentMethod'] == 'PayPal'

    def test_empty_update(self, client, auth_headers, booking):
        response = client.patch(f'/api/bookings/{booking.id}', headers=auth_headers, json={})
        assert response.status_code == 422

    def test_update_non_object_body(self, client, auth_headers, booking):
        response = client.patch(f'/api/bookings/{booking.id}', headers=auth_headers, json='cancelled')

        assert response.status_code == 422
        assert 'body' in json.loads(response.data)['errors']

    def test_owner_can_cancel_via_status(self, client, auth_headers, booking):
        response = client.patch(f'/api/bookings/{booking.id}', headers=auth_headers, json={'status': 'cancelled'})

        assert response.status_code == 200
        data = json.loads(response.data)['data']['booking']
        assert data['status'] == 'cancelled'
        assert data['cancelledAt'] is not None

    def test_only_admin_completes(self, client, auth_headers, admin_headers, booking):
        response = client.patch(f'/api/bookings/{booking.id}', headers=auth_headers, json={'status': 'completed'})
        assert response.status_code == 403

        response = client.patch(f'/api/bookings/{booking.id}', headers=admin_headers, json={'status': 'completed'})
        assert response.status_code == 200
        assert json.loads(response.data)['data']['booking']['status'] == 'completed'

    def test_cancelled_booking_is_frozen(self, client, db, auth_headers, booking):
        booking.cancel()
        db.session.commit()

        response = client.patch(f'/api/bookings/{booking.id}', headers=auth_headers, json={'passengers': 2})
        assert response.status_code == 409

        response = client.patch(f'/api/bookings/{booking.id}', headers=auth_headers, json={'status': 'completed'})
        assert response.status_code == 409

    def test_cancel_endpoint(self, client, auth_headers, booking):
        response = client.post(f'/api/bookings/{booking.id}/cancel', headers=auth_headers)
        assert response.status_code == 200
        assert json.loads(response.data)['data']['booking']['status'] == 'cancelled'

        again = client.post(f'/api/bookings/{booking.id}/cancel', headers=auth_headers)
        assert again.status_code == 409


class TestDeleteBooking:

    def test_delete_requires_admin(self, client, auth_headers, booking):
        assert client.delete(f'/api/bookings/{booking.id}', headers=auth_headers).status_code == 403

    def test_admin_delete(self, client, db, admin_headers, booking):
        booking_id = booking.id

        response = client.delete(f'/api/bookings/{booking_id}', headers=admin_headers)

        assert response.status_code == 200
        assert db.session.get(Booking, booking_id) is None
        assert client.delete(f'/api/bookings/{booking_id}', headers=admin_headers).status_code == 404
