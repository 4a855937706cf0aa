from flask import request, current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from jetsetgo.extensions import db
from jetsetgo.models import User
from jetsetgo.models.enums import UserRole
from jetsetgo.api.auth.schemas import AuthSchemas
from jetsetgo.api.auth.tokens import issue_tokens
from jetsetgo.utils.api_response import APIResponse
from jetsetgo.utils.audit_logging import AuditLogger

from jetsetgo.api.auth import auth_bp

@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Register a new user

    Request Body:
        {
            "name": "John Doe",
            "email": "john@example.com",
            "password": "SecurePass123",
            "confirmPassword": "SecurePass123" (optional)
        }

    Returns:
        201: User created successfully with tokens
        409: Email already exists
        422: Validation error
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        # Validate input
        is_valid, errors, cleaned_data = AuthSchemas.validate_registration(data)
        if not is_valid:
            return APIResponse.validation_error(errors)

        # Check if email already exists
        if User.query.filter_by(email=cleaned_data['email']).first():
            return APIResponse.conflict('Email already registered')

        user = User(
            name=cleaned_data['name'],
            email=cleaned_data['email'],
            role=UserRole.USER,
            preferences={},
            is_active=True
        )
        user.set_password(cleaned_data['password'])

        db.session.add(user)
        db.session.commit()

        AuditLogger.log_action(
            user_id=user.id,
            action='user_registered',
            entity_type='user',
            entity_id=user.id,
            description=f'New user registered: {user.email}'
        )

        return APIResponse.success(
            data={
                'user': user.to_dict(),
                'tokens': issue_tokens(user)
            },
            message='Registration successful',
            status_code=201
        )

    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.session.rollback()
        return APIResponse.conflict('Email already registered')
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Registration error: {str(e)}")
        return APIResponse.error('An error occurred during registration. Please try again.', status_code=500)
