from flask import request, current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jetsetgo.extensions import db
from jetsetgo.models import Content
from jetsetgo.utils.api_response import APIResponse
from jetsetgo.utils.audit_logging import AuditLogger
from jetsetgo.utils.decorators import admin_required, editor_required, current_user_or_none
from .public import filter_content, paginated_content
from .schemas import ContentSchemas, parse_content_status

from . import cms_bp


def _slug_taken(slug, exclude_id=None):
    query = Content.query.filter(Content.slug == slug)
    if exclude_id:
        query = query.filter(Content.id != exclude_id)
    return query.first() is not None


@cms_bp.route('/admin/content', methods=['GET'])
@editor_required()
def get_admin_content():
    """
    List content in any status

    Query params:
        - contentType, status, q
        - page, limit
    """
    try:
        query, errors = filter_content(Content.query, request.args)
        if errors:
            return APIResponse.validation_error(errors)

        status = request.args.get('status', '').strip()
        if status:
            parsed = parse_content_status(status)
            if parsed is None:
                return APIResponse.validation_error({'status': 'Invalid status filter'})
            query = query.filter(Content.status == parsed)

        return APIResponse.success(data=paginated_content(query, request.args),
                                   message='Content retrieved successfully')

    except SQLAlchemyError as e:
        current_app.logger.error(f"Get admin content error: {str(e)}")
        return APIResponse.error('An error occurred while fetching content', status_code=500)


@cms_bp.route('/admin/content/<content_id>', methods=['GET'])
@editor_required()
def get_admin_content_item(content_id):
    content = db.session.get(Content, content_id)
    if not content:
        return APIResponse.not_found('Content not found')
    return APIResponse.success(data={'content': content.to_dict()}, message='Content retrieved successfully')


@cms_bp.route('/admin/content', methods=['POST'])
@editor_required()
def create_content():
    """
    Create a page

    Request Body:
        {
            "title": "About JetSetGo",
            "content": "<p>...</p>",
            "contentType": "about",
            "status": "draft",          // optional
            "slug": "about-us",         // optional, derived from title
            "featuredImage": "",        // optional
            "metaTitle": "",            // optional
            "metaDescription": ""       // optional
        }

    Returns:
        201: Content created
        409: Slug already in use
        422: Validation error
    """
    user = current_user_or_none()
    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        is_valid, errors, cleaned_data = ContentSchemas.validate_content(data)
        if not is_valid:
            return APIResponse.validation_error(errors)

        if _slug_taken(cleaned_data['slug']):
            return APIResponse.conflict('A page with this slug already exists')

        content = Content(created_by=user.id, updated_by=user.id, **cleaned_data)
        db.session.add(content)
        db.session.commit()

        AuditLogger.log_action(
            user_id=user.id,
            action='content_created',
            entity_type='content',
            entity_id=content.id,
            description=f'Content "{content.slug}" created'
        )

        return APIResponse.success(data={'content': content.to_dict()}, message='Content created', status_code=201)

    except IntegrityError:
        db.session.rollback()
        return APIResponse.conflict('A page with this slug already exists')
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Create content error: {str(e)}")
        return APIResponse.error('An error occurred while creating content', status_code=500)


@cms_bp.route('/admin/content/<content_id>', methods=['PUT', 'PATCH'])
@editor_required()
def update_content(content_id):
    """Partial update; only the fields present in the body change"""
    user = current_user_or_none()
    content = db.session.get(Content, content_id)
    if not content:
        return APIResponse.not_found('Content not found')

    try:
        data = request.get_json(silent=True) or {}
        if not isinstance(data, dict):
            return APIResponse.validation_error({'body': 'Request body must be a JSON object'})

        is_valid, errors, cleaned_data = ContentSchemas.validate_content(data, partial=True)
        if not is_valid:
            return APIResponse.validation_error(errors)

        if 'slug' in cleaned_data and _slug_taken(cleaned_data['slug'], exclude_id=content.id):
            return APIResponse.conflict('A page with this slug already exists')

        for column, value in cleaned_data.items():
            setattr(content, column, value)
        content.updated_by = user.id
        db.session.commit()

        AuditLogger.log_action(
            user_id=user.id,
            action='content_updated',
            entity_type='content',
            entity_id=content.id,
            description=f'Content "{content.slug}" updated',
            changes={'fields': sorted(cleaned_data.keys())}
        )

        return APIResponse.success(data={'content': content.to_dict()}, message='Content updated')

    except IntegrityError:
        db.session.rollback()
        return APIResponse.conflict('A page with this slug already exists')
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Update content error: {str(e)}")
        return APIResponse.error('An error occurred while updating content', status_code=500)


@cms_bp.route('/admin/content/<content_id>', methods=['DELETE'])
@admin_required()
def delete_content(content_id):
    user = current_user_or_none()
    content = db.session.get(Content, content_id)
    if not content:
        return APIResponse.not_found('Content not found')

    try:
        slug = content.slug
        db.session.delete(content)
        db.session.commit()

        AuditLogger.log_action(
            user_id=user.id,
            action='content_deleted',
            entity_type='content',
            entity_id=content_id,
            description=f'Content "{slug}" deleted'
        )

        return APIResponse.success(message='Content deleted successfully')

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Delete content error: {str(e)}")
        return APIResponse.error('An error occurred while deleting content', status_code=500)
