from flask import request, current_app
from flask_jwt_extended import (
    jwt_required,
    get_jwt_identity,
    get_jwt
)
from datetime import datetime, timezone
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jetsetgo.extensions import db
from jetsetgo.models import User
from jetsetgo.models.revoked_tokens import RevokedToken
from jetsetgo.api.auth.schemas import AuthSchemas
from jetsetgo.api.auth.tokens import issue_tokens
from jetsetgo.utils.api_response import APIResponse
from jetsetgo.utils.audit_logging import AuditLogger

from jetsetgo.api.auth import auth_bp


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Login user with email and password

    Request Body:
        {
            "email": "john@example.com",
            "password": "SecurePass123"
        }

    Returns:
        200: Login successful with tokens
        401: Invalid credentials
        403: Account deactivated
        422: Validation error
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        # Validate input
        is_valid, errors, cleaned_data = AuthSchemas.validate_login(data)
        if not is_valid:
            return APIResponse.validation_error(errors)

        # Find user by email
        user = User.query.filter_by(email=cleaned_data['email']).first()

        # Check if user exists and password is correct
        if not user or not user.check_password(cleaned_data['password']):
            if user:
                AuditLogger.log_action(
                    user_id=user.id,
                    action='login_failed',
                    description='Failed login attempt - invalid password'
                )
            return APIResponse.unauthorized('Invalid email or password')

        # Check if account is active
        if not user.is_active:
            return APIResponse.forbidden('Your account has been deactivated. Please contact support.')

        user.last_login = datetime.now(timezone.utc)
        db.session.commit()

        AuditLogger.log_action(
            user_id=user.id,
            action='user_login',
            description=f'User logged in: {user.email}'
        )

        return APIResponse.success(
            data={
                'user': user.to_dict(),
                'tokens': issue_tokens(user)
            },
            message='Login successful'
        )

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Login error: {str(e)}")
        return APIResponse.error('An error occurred during login. Please try again.', status_code=500)


@auth_bp.route('/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh():
    """
    Rotate tokens using a refresh token

    Headers:
        Authorization: Bearer <refresh_token>

    Returns:
        200: New access and refresh tokens
        401: Invalid, expired or already used refresh token
    """
    try:
        current_user_id = get_jwt_identity()
        jti = get_jwt()['jti']

        user = db.session.get(User, current_user_id)
        if not user or not user.is_active:
            return APIResponse.unauthorized('User not found or inactive')

        # Each refresh token is single use
        try:
            db.session.add(RevokedToken(jti=jti, type='refresh'))
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            return APIResponse.unauthorized('Token has already been used')

        return APIResponse.success(
            data={
                'tokens': issue_tokens(user)
            },
            message='Token refreshed successfully'
        )

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Token refresh error: {str(e)}")
        return APIResponse.error('An error occurred during token refresh', status_code=500)


@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """
    Logout user and revoke the access token

    Headers:
        Authorization: Bearer <access_token>

    Returns:
        200: Logout successful
    """
    try:
        jti = get_jwt()['jti']
        db.session.add(RevokedToken(jti=jti, type='access'))
        db.session.commit()

        AuditLogger.log_action(
            user_id=get_jwt_identity(),
            action='user_logout',
            description='User logged out'
        )

        return APIResponse.success(message='Logout successful')

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Logout error: {str(e)}")
        return APIResponse.error('An error occurred during logout', status_code=500)
