from flask import request, current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from jetsetgo.models import Content
from jetsetgo.models.enums import ContentStatus
from jetsetgo.utils.api_response import APIResponse
from jetsetgo.utils.validation import parse_pagination
from .schemas import parse_content_type

from . import cms_bp


def filter_content(query, args):
    """
    Apply the contentType and q (title/body search) filters.

    Returns (query, errors).
    """
    content_type = args.get('contentType', '').strip()
    if content_type:
        parsed = parse_content_type(content_type)
        if parsed is None:
            return query, {'contentType': 'Invalid content type'}
        query = query.filter(Content.content_type == parsed)

    search = args.get('q', '').strip()
    if search:
        term = f"%{search}%"
        query = query.filter(or_(Content.title.ilike(term), Content.body.ilike(term)))

    return query, None


def paginated_content(query, args):
    pagination = parse_pagination(args)
    total = query.count()
    items = (query.order_by(Content.updated_at.desc())
                  .offset((pagination['page'] - 1) * pagination['limit'])
                  .limit(pagination['limit']).all())
    return {
        'content': [item.to_dict() for item in items],
        'pagination': APIResponse.pagination(total, pagination['page'], pagination['limit'])
    }


@cms_bp.route('/content', methods=['GET'])
def get_public_content():
    """
    List published content

    Query params:
        - contentType: about | faq | terms | privacy | contact
        - q: search in title and body
        - page, limit: pagination (limit max 100)
    """
    try:
        query = Content.query.filter(Content.status == ContentStatus.PUBLISHED)
        query, errors = filter_content(query, request.args)
        if errors:
            return APIResponse.validation_error(errors)

        return APIResponse.success(data=paginated_content(query, request.args),
                                   message='Content retrieved successfully')

    except SQLAlchemyError as e:
        current_app.logger.error(f"Get public content error: {str(e)}")
        return APIResponse.error('An error occurred while fetching content', status_code=500)


@cms_bp.route('/content/<slug>', methods=['GET'])
def get_content_by_slug(slug):
    """Published page by slug; drafts and archived pages are 404"""
    content = Content.query.filter_by(slug=slug.strip().lower()).first()
    if not content or not content.is_published():
        return APIResponse.not_found('Content not found')

    return APIResponse.success(data={'content': content.to_dict()}, message='Content retrieved successfully')
