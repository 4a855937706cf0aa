from flask import request, current_app, jsonify
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import SQLAlchemyError

from jetsetgo.extensions import db
from jetsetgo.models import Feedback
from jetsetgo.api.main.schemas import FeedbackSchemas
from jetsetgo.utils.api_response import APIResponse
from jetsetgo.utils.decorators import admin_required, current_user_or_none
from jetsetgo.utils.validation import parse_pagination

from jetsetgo.api.main import main_bp


@main_bp.route('/feedback', methods=['POST'])
@jwt_required(optional=True)
def submit_feedback():
    """
    Submit feedback

    Request Body:
        {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "subject": "Great service",
            "message": "Booking was quick and easy.",
            "rating": 5
        }

    Returns:
        201: Feedback stored
        422: Validation error
    """
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        is_valid, errors, cleaned_data = FeedbackSchemas.validate_feedback(data)
        if not is_valid:
            return APIResponse.validation_error(errors)

        user = current_user_or_none()
        feedback = Feedback(user_id=user.id if user else None, **cleaned_data)
        db.session.add(feedback)
        db.session.commit()

        current_app.logger.info(f"Feedback received (rating {feedback.rating}): {feedback.subject}")

        return jsonify({
            'success': True,
            'message': 'Thank you for your feedback!',
            'data': {'id': feedback.id}
        }), 201

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Feedback submission error: {str(e)}")
        return APIResponse.error('Could not save your feedback. Please try again.', status_code=500)


@main_bp.route('/feedback', methods=['GET'])
@admin_required()
def list_feedback():
    """List feedback, newest first (admin only)"""
    try:
        pagination = parse_pagination(request.args, default_limit=20)
        query = Feedback.query.order_by(Feedback.created_at.desc())

        total = query.count()
        items = query.offset((pagination['page'] - 1) * pagination['limit']).limit(pagination['limit']).all()

        return APIResponse.success(
            data={
                'feedback': [item.to_dict() for item in items],
                'pagination': APIResponse.pagination(total, pagination['page'], pagination['limit'])
            },
            message='Feedback retrieved successfully'
        )

    except SQLAlchemyError as e:
        current_app.logger.error(f"List feedback error: {str(e)}")
        return APIResponse.error('An error occurred while fetching feedback', status_code=500)
