from typing import Any, Dict, Optional, Tuple

from jetsetgo.utils.validation import validate_email_format, parse_whole_number


class FeedbackSchemas:
    """Validation schemas for feedback endpoints"""

    @staticmethod
    def validate_feedback(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """
        Validate a feedback submission

        Returns:
            Tuple of (is_valid, errors, cleaned_data)
        """
        errors = {}
        cleaned_data = {}

        name = str(data.get('name') or '').strip()
        if not name:
            errors['name'] = 'Name is required'
        elif len(name) > 100:
            errors['name'] = 'Name must be at most 100 characters'
        else:
            cleaned_data['name'] = name

        email = str(data.get('email') or '').strip().lower()
        if not email:
            errors['email'] = 'Email is required'
        elif not validate_email_format(email):
            errors['email'] = 'Invalid email format'
        else:
            cleaned_data['email'] = email

        subject = str(data.get('subject') or '').strip()
        if not subject:
            errors['subject'] = 'Subject is required'
        elif len(subject) > 200:
            errors['subject'] = 'Subject must be at most 200 characters'
        else:
            cleaned_data['subject'] = subject

        message = str(data.get('message') or '').strip()
        if not message:
            errors['message'] = 'Message is required'
        else:
            cleaned_data['message'] = message

        raw_rating = data.get('rating')
        rating = parse_whole_number(raw_rating)
        if raw_rating in (None, ''):
            errors['rating'] = 'Rating is required'
        elif rating is None:
            errors['rating'] = 'Rating must be a whole number from 1 to 5'
        elif not 1 <= rating <= 5:
            errors['rating'] = 'Rating must be between 1 and 5'
        else:
            cleaned_data['rating'] = rating

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, cleaned_data if is_valid else None
