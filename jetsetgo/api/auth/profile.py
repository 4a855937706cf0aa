from flask import request, current_app
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jetsetgo.extensions import db
from jetsetgo.models import User
from jetsetgo.api.auth.schemas import AuthSchemas
from jetsetgo.utils.api_response import APIResponse
from jetsetgo.utils.audit_logging import AuditLogger
from jetsetgo.utils.decorators import current_user_or_none

from jetsetgo.api.auth import auth_bp


@auth_bp.route('/me', methods=['GET'])
@jwt_required()
def get_current_user():
    """
    Get current authenticated user

    Headers:
        Authorization: Bearer <access_token>

    Returns:
        200: Current user data
        401: Invalid or expired token
    """
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    return APIResponse.success(
        data={'user': user.to_dict()},
        message='User retrieved successfully'
    )


@auth_bp.route('/profile', methods=['GET'])
@jwt_required()
def get_profile():
    """Full profile: contact details and travel preferences"""
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    return APIResponse.success(
        data={'profile': user.to_profile_dict()},
        message='Profile retrieved successfully'
    )


@auth_bp.route('/profile', methods=['PUT', 'PATCH'])
@jwt_required()
def update_profile():
    """
    Update profile fields

    Request Body (all optional):
        {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "(555) 123-4567",
            "address": "123 Main St, New York, NY 10001",
            "preferences": {
                "seatType": "Window",
                "mealPreference": "Vegetarian",
                "preferredAirlines": "JetBlue, Delta",
                "preferredClass": "Economy"
            }
        }

    Preferences are merged into the stored ones, not replaced.

    Returns:
        200: Updated profile
        409: Email taken by another account
        422: Validation error
    """
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        is_valid, errors, cleaned_data = AuthSchemas.validate_profile_update(data)
        if not is_valid:
            return APIResponse.validation_error(errors)

        new_email = cleaned_data.get('email')
        if new_email and new_email != user.email:
            if User.query.filter(User.email == new_email, User.id != user.id).first():
                return APIResponse.conflict('Email already registered')

        changes = {}
        for field in ('name', 'email', 'phone', 'address'):
            if field in cleaned_data and getattr(user, field) != cleaned_data[field]:
                changes[field] = {'old': getattr(user, field), 'new': cleaned_data[field]}
                setattr(user, field, cleaned_data[field])

        if 'preferences' in cleaned_data:
            merged = dict(user.preferences or {})
            merged.update(cleaned_data['preferences'])
            if merged != (user.preferences or {}):
                changes['preferences'] = {'old': user.preferences, 'new': merged}
            # Reassign so SQLAlchemy notices the JSON change
            user.preferences = merged

        db.session.commit()

        if changes:
            AuditLogger.log_action(
                user_id=user.id,
                action='profile_updated',
                entity_type='user',
                entity_id=user.id,
                description='User updated profile',
                changes=changes
            )

        return APIResponse.success(
            data={'profile': user.to_profile_dict()},
            message='Profile updated successfully'
        )

    except IntegrityError:
        db.session.rollback()
        return APIResponse.conflict('Email already registered')
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Profile update error: {str(e)}")
        return APIResponse.error('An error occurred while updating your profile', status_code=500)


@auth_bp.route('/password/change', methods=['POST'])
@jwt_required()
def change_password():
    """
    Change password

    Request Body:
        {
            "currentPassword": "OldPass123",
            "newPassword": "NewPass456"
        }
    """
    user = current_user_or_none()
    if not user:
        return APIResponse.unauthorized('User not found or inactive')

    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        is_valid, errors, cleaned_data = AuthSchemas.validate_password_change(data)
        if not is_valid:
            return APIResponse.validation_error(errors)

        if not user.check_password(cleaned_data['current_password']):
            return APIResponse.unauthorized('Current password is incorrect')

        user.set_password(cleaned_data['new_password'])
        db.session.commit()

        AuditLogger.log_action(
            user_id=user.id,
            action='password_changed',
            entity_type='user',
            entity_id=user.id,
            description='User changed password'
        )

        return APIResponse.success(message='Password changed successfully')

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Password change error: {str(e)}")
        return APIResponse.error('An error occurred while changing your password', status_code=500)
