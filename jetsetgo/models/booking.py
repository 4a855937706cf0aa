import random
import string
import uuid
from jetsetgo.extensions import db
from jetsetgo.models.enums import BookingStatus, TravelClass
from jetsetgo.models.user import utcnow

REFERENCE_ALPHABET = string.ascii_uppercase + string.digits
REFERENCE_LENGTH = 6

# Flight snapshot columns, keyed by their API (camelCase) names
SNAPSHOT_FIELDS = {
    'airline': 'airline',
    'flightNumber': 'flight_number',
    'departureCity': 'departure_city',
    'departureAirport': 'departure_airport',
    'departureDate': 'departure_date',
    'departureTime': 'departure_time',
    'arrivalCity': 'arrival_city',
    'arrivalAirport': 'arrival_airport',
    'arrivalDate': 'arrival_date',
    'arrivalTime': 'arrival_time',
    'duration': 'duration',
}


class Booking(db.Model):
    __tablename__ = 'bookings'

    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    booking_reference = db.Column(db.String(REFERENCE_LENGTH), unique=True, nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)

    # Flight snapshot, copied from the offer at booking time
    airline = db.Column(db.String(100))
    flight_number = db.Column(db.String(20))
    departure_city = db.Column(db.String(100))
    departure_airport = db.Column(db.String(10))
    departure_date = db.Column(db.String(20))
    departure_time = db.Column(db.String(20))
    arrival_city = db.Column(db.String(100))
    arrival_airport = db.Column(db.String(10))
    arrival_date = db.Column(db.String(20))
    arrival_time = db.Column(db.String(20))
    duration = db.Column(db.String(20))

    passengers = db.Column(db.Integer, default=1, nullable=False)
    travel_class = db.Column(db.Enum(TravelClass), default=TravelClass.ECONOMY, nullable=False)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    currency = db.Column(db.String(3), default='USD', nullable=False)
    status = db.Column(db.Enum(BookingStatus), default=BookingStatus.CONFIRMED, nullable=False)
    payment_method = db.Column(db.String(50), default='Credit Card', nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)
    cancelled_at = db.Column(db.DateTime)

    def __init__(self, **kwargs):
        super(Booking, self).__init__(**kwargs)
        if not self.booking_reference:
            self.booking_reference = self.generate_booking_reference()

    @staticmethod
    def generate_booking_reference():
        """Generate a random alphanumeric reference like 'K7Q2ZD'"""
        return ''.join(random.choices(REFERENCE_ALPHABET, k=REFERENCE_LENGTH))

    @classmethod
    def unique_booking_reference(cls, attempts=10):
        """Generate a reference not yet used by any booking"""
        for _ in range(attempts):
            reference = cls.generate_booking_reference()
            if not cls.query.filter_by(booking_reference=reference).first():
                return reference
        raise RuntimeError('Could not generate a unique booking reference')

    def can_transition_to(self, new_status: BookingStatus) -> bool:
        """Only confirmed bookings move, and only to cancelled or completed"""
        return (self.status == BookingStatus.CONFIRMED and
                new_status in (BookingStatus.CANCELLED, BookingStatus.COMPLETED))

    def cancel(self):
        self.status = BookingStatus.CANCELLED
        self.cancelled_at = utcnow()

    def flight_details(self):
        return {key: getattr(self, column) for key, column in SNAPSHOT_FIELDS.items()}

    def to_dict(self):
        return {
            'id': self.id,
            'bookingReference': self.booking_reference,
            'userId': self.user_id,
            'flightDetails': self.flight_details(),
            'passengers': self.passengers,
            'travelClass': self.travel_class.value if self.travel_class else None,
            'price': float(self.price) if self.price is not None else None,
            'currency': self.currency,
            'status': self.status.value if self.status else None,
            'paymentMethod': self.payment_method,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
            'cancelledAt': self.cancelled_at.isoformat() if self.cancelled_at else None,
        }
