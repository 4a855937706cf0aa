from typing import Any, Dict, Optional, Tuple

from jetsetgo.models.content import slugify
from jetsetgo.models.enums import ContentType, ContentStatus

# request key -> (column, max length)
OPTIONAL_TEXT_FIELDS = {
    'featuredImage': ('featured_image', 500),
    'metaTitle': ('meta_title', 200),
    'metaDescription': ('meta_description', 500),
}


def parse_content_type(value: Any) -> Optional[ContentType]:
    try:
        return ContentType(str(value).strip().lower())
    except ValueError:
        return None


def parse_content_status(value: Any) -> Optional[ContentStatus]:
    try:
        return ContentStatus(str(value).strip().lower())
    except ValueError:
        return None


class ContentSchemas:
    """Validation schemas for CMS endpoints"""

    @staticmethod
    def validate_content(data: Dict[str, Any], partial: bool = False) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """
        Validate content for create (partial=False) or update (partial=True).

        On create a missing slug is derived from the title.

        Returns:
            Tuple of (is_valid, errors, cleaned_data)
        """
        errors = {}
        cleaned_data = {}

        if not partial or 'title' in data:
            title = str(data.get('title') or '').strip()
            if not title:
                errors['title'] = 'Title is required'
            elif len(title) > 200:
                errors['title'] = 'Title must be at most 200 characters'
            else:
                cleaned_data['title'] = title

        if not partial or 'content' in data:
            body = str(data.get('content') or '')
            if not body.strip():
                errors['content'] = 'Content is required'
            else:
                cleaned_data['body'] = body

        if 'slug' in data and data.get('slug'):
            slug = slugify(str(data['slug']))
            if not slug:
                errors['slug'] = 'Slug must contain letters or numbers'
            else:
                cleaned_data['slug'] = slug
        elif 'slug' in data and partial:
            errors['slug'] = 'Slug cannot be empty'
        elif not partial and cleaned_data.get('title'):
            slug = slugify(cleaned_data['title'])
            if not slug:
                errors['slug'] = 'Slug is required when the title has no letters or numbers'
            else:
                cleaned_data['slug'] = slug

        if cleaned_data.get('slug') and len(cleaned_data['slug']) > 200:
            errors['slug'] = 'Slug must be at most 200 characters'

        if 'contentType' in data or not partial:
            content_type = parse_content_type(data.get('contentType') or ContentType.ABOUT.value)
            if content_type is None:
                errors['contentType'] = 'Content type must be one of: ' + ', '.join(t.value for t in ContentType)
            else:
                cleaned_data['content_type'] = content_type

        if 'status' in data or not partial:
            status = parse_content_status(data.get('status') or ContentStatus.DRAFT.value)
            if status is None:
                errors['status'] = 'Status must be one of: ' + ', '.join(s.value for s in ContentStatus)
            else:
                cleaned_data['status'] = status

        for key, (column, max_length) in OPTIONAL_TEXT_FIELDS.items():
            if key in data:
                value = str(data.get(key) or '').strip()
                if len(value) > max_length:
                    errors[key] = f'Must be at most {max_length} characters'
                else:
                    cleaned_data[column] = value

        if partial and not errors and not cleaned_data:
            errors['body'] = 'No updatable fields provided'

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, cleaned_data if is_valid else None
