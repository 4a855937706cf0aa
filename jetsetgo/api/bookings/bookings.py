from flask import request, current_app
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jetsetgo.extensions import db
from jetsetgo.models import Booking
from jetsetgo.models.enums import BookingStatus
from jetsetgo.api.bookings.schemas import BookingSchemas
from jetsetgo.utils.api_response import APIResponse
from jetsetgo.utils.audit_logging import AuditLogger
from jetsetgo.utils.decorators import admin_required, current_user_or_none
from jetsetgo.utils.validation import parse_bool, parse_pagination

from . import bookings_bp


def _find_booking(user, **filters):
    """Booking matching filters, visible only to its owner or an admin"""
    booking = Booking.query.filter_by(**filters).first()
    if not booking:
        return None
    if booking.user_id != user.id and not user.is_admin():
        return None
    return booking


def _change_status(user, booking, new_status):
    """
    Apply a status transition

    Returns an error response, or None when the change was applied.
    """
    if booking.status == new_status:
        return None
    if not booking.can_transition_to(new_status):
        return APIResponse.conflict(
            f'Cannot change booking from {booking.status.value} to {new_status.value}'
        )
    if new_status == BookingStatus.COMPLETED and not user.is_admin():
        return APIResponse.forbidden('Only administrators can complete bookings')

    if new_status == BookingStatus.CANCELLED:
        booking.cancel()
    else:
        booking.status = new_status
    return None


@bookings_bp.route('', methods=['POST'])
@jwt_required()
def create_booking():
    """
    Create a booking for the current user

    Request Body (snapshot form):
        {
            "flightDetails": {
                "airline": "Korean Air",
                "flightNumber": "KE081",
                "departureAirport": "ICN",
                "arrivalAirport": "JFK",
                ...
            },
            "price": 1250.00,
            "passengers": 2,
            "travelClass": "ECONOMY",
            "paymentMethod": "Credit Card"
        }

    Or pass the raw search result as "flightOffer" (plus optional
    "dictionaries") and the snapshot and price are derived from it.

    Returns:
        201: Booking created
        422: Validation error
    """
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        is_valid, errors, cleaned_data = BookingSchemas.validate_create(data)
        if not is_valid:
            return APIResponse.validation_error(errors)

        booking = Booking(
            user_id=user.id,
            booking_reference=Booking.unique_booking_reference(),
            status=BookingStatus.CONFIRMED,
            **cleaned_data
        )
        db.session.add(booking)
        db.session.commit()

        AuditLogger.log_action(
            user_id=user.id,
            action='booking_created',
            entity_type='booking',
            entity_id=booking.id,
            description=f'Booking {booking.booking_reference} created'
        )

        current_app.logger.info(f"Booking {booking.booking_reference} created for user {user.id}")

        return APIResponse.success(
            data={'booking': booking.to_dict()},
            message='Booking confirmed',
            status_code=201
        )

    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Booking reference collision: {str(e)}")
        return APIResponse.conflict('Could not allocate a booking reference, please retry')
    except (SQLAlchemyError, RuntimeError) as e:
        db.session.rollback()
        current_app.logger.error(f"Create booking error: {str(e)}")
        return APIResponse.error('An error occurred while creating the booking', status_code=500)


@bookings_bp.route('', methods=['GET'])
@jwt_required()
def list_bookings():
    """
    List the current user's bookings, newest first

    Query params:
        - status: confirmed | cancelled | completed
        - page, perPage: pagination (perPage max 100)
        - all: admins only, list every user's bookings
    """
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    try:
        pagination = parse_pagination(request.args, limit_key='perPage')

        if parse_bool(request.args.get('all')):
            if not user.is_admin():
                return APIResponse.forbidden("You don't have permission to access this resource")
            query = Booking.query
        else:
            query = Booking.query.filter_by(user_id=user.id)

        status = request.args.get('status', '').strip().lower()
        if status:
            try:
                query = query.filter_by(status=BookingStatus(status))
            except ValueError:
                return APIResponse.validation_error({'status': 'Invalid status filter'})

        query = query.order_by(Booking.created_at.desc())
        total = query.count()
        bookings = (query.offset((pagination['page'] - 1) * pagination['limit'])
                         .limit(pagination['limit']).all())

        return APIResponse.success(
            data={
                'bookings': [booking.to_dict() for booking in bookings],
                'pagination': APIResponse.pagination(total, pagination['page'], pagination['limit'])
            },
            message='Bookings retrieved successfully'
        )

    except SQLAlchemyError as e:
        current_app.logger.error(f"List bookings error: {str(e)}")
        return APIResponse.error('An error occurred while fetching bookings', status_code=500)


@bookings_bp.route('/<booking_id>', methods=['GET'])
@jwt_required()
def get_booking(booking_id):
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    booking = _find_booking(user, id=booking_id)
    if not booking:
        return APIResponse.not_found('Booking not found')

    return APIResponse.success(data={'booking': booking.to_dict()}, message='Booking retrieved successfully')


@bookings_bp.route('/reference/<reference>', methods=['GET'])
@jwt_required()
def get_booking_by_reference(reference):
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    booking = _find_booking(user, booking_reference=reference.strip().upper())
    if not booking:
        return APIResponse.not_found('Booking not found')

    return APIResponse.success(data={'booking': booking.to_dict()}, message='Booking retrieved successfully')


@bookings_bp.route('/<booking_id>', methods=['PATCH', 'PUT'])
@jwt_required()
def update_booking(booking_id):
    """
    Update a booking

    Request Body (all optional):
        {
            "passengers": 3,
            "travelClass": "BUSINESS",
            "paymentMethod": "PayPal",
            "status": "cancelled"
        }

    Details can only change while the booking is confirmed. Status moves
    from confirmed to cancelled (owner or admin) or completed (admin).
    """
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    booking = _find_booking(user, id=booking_id)
    if not booking:
        return APIResponse.not_found('Booking not found')

    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        is_valid, errors, cleaned_data = BookingSchemas.validate_update(data)
        if not is_valid:
            return APIResponse.validation_error(errors)

        new_status = cleaned_data.pop('status', None)

        if cleaned_data and booking.status != BookingStatus.CONFIRMED:
            return APIResponse.conflict(f'Cannot modify a {booking.status.value} booking')

        changes = {}
        for column, value in cleaned_data.items():
            old = getattr(booking, column)
            if old != value:
                changes[column] = {
                    'old': old.value if hasattr(old, 'value') else old,
                    'new': value.value if hasattr(value, 'value') else value
                }
                setattr(booking, column, value)

        if new_status is not None and new_status != booking.status:
            old_status = booking.status.value
            error = _change_status(user, booking, new_status)
            if error:
                db.session.rollback()
                return error
            changes['status'] = {'old': old_status, 'new': new_status.value}

        db.session.commit()

        if changes:
            AuditLogger.log_action(
                user_id=user.id,
                action='booking_updated',
                entity_type='booking',
                entity_id=booking.id,
                description=f'Booking {booking.booking_reference} updated',
                changes=changes
            )

        return APIResponse.success(data={'booking': booking.to_dict()}, message='Booking updated successfully')

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Update booking error: {str(e)}")
        return APIResponse.error('An error occurred while updating the booking', status_code=500)


@bookings_bp.route('/<booking_id>/cancel', methods=['POST'])
@jwt_required()
def cancel_booking(booking_id):
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    booking = _find_booking(user, id=booking_id)
    if not booking:
        return APIResponse.not_found('Booking not found')

    if booking.status != BookingStatus.CONFIRMED:
        return APIResponse.conflict(f'Cannot cancel a {booking.status.value} booking')

    try:
        booking.cancel()
        db.session.commit()

        AuditLogger.log_action(
            user_id=user.id,
            action='booking_cancelled',
            entity_type='booking',
            entity_id=booking.id,
            description=f'Booking {booking.booking_reference} cancelled'
        )

        return APIResponse.success(data={'booking': booking.to_dict()}, message='Booking cancelled')

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Cancel booking error: {str(e)}")
        return APIResponse.error('An error occurred while cancelling the booking', status_code=500)


@bookings_bp.route('/<booking_id>', methods=['DELETE'])
@admin_required()
def delete_booking(booking_id):
    """Permanently delete a booking (admin only)"""
    booking = db.session.get(Booking, booking_id)
    if not booking:
        return APIResponse.not_found('Booking not found')

    try:
        reference = booking.booking_reference
        db.session.delete(booking)
        db.session.commit()

        AuditLogger.log_action(
            user_id=current_user_or_none().id,
            action='booking_deleted',
            entity_type='booking',
            entity_id=booking_id,
            description=f'Booking {reference} deleted'
        )

        return APIResponse.success(message='Booking deleted')

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Delete booking error: {str(e)}")
        return APIResponse.error('An error occurred while deleting the booking', status_code=500)
