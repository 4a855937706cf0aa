import re
from typing import Any, Dict, Optional

EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
IATA_PATTERN = re.compile(r'^[A-Z]{3}$')
WHOLE_NUMBER_PATTERN = re.compile(r'^[+-]?\d+$')


def validate_email_format(email: str) -> bool:
    return EMAIL_PATTERN.match(email) is not None


def validate_password_strength(password: str) -> bool:
    """Must contain at least one letter and one number"""
    has_letter = any(c.isalpha() for c in password)
    has_number = any(c.isdigit() for c in password)
    return has_letter and has_number


def validate_phone(phone: str) -> bool:
    cleaned = re.sub(r'[\s\-\(\)\.]', '', phone)
    if cleaned.startswith('+'):
        cleaned = cleaned[1:]
    return cleaned.isdigit() and 7 <= len(cleaned) <= 15


def parse_int(value: Any, default: Optional[int] = None) -> Optional[int]:
    """int() that returns the default for None, '', bools and garbage"""
    if value is None or value == '' or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default


def parse_whole_number(value: Any) -> Optional[int]:
    """
    Strict integer parsing for request fields: ints, integral floats and
    digit strings. Anything else (bools, '1.5', 'abc', lists) is None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and WHOLE_NUMBER_PATTERN.match(value.strip()):
        return int(value.strip())
    return None


def parse_bool(value: Any) -> Optional[bool]:
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def parse_pagination(args: Dict[str, Any], default_limit: int = 10, max_limit: int = 100,
                     limit_key: str = 'limit') -> Dict[str, int]:
    """Validate and clean pagination parameters"""
    page = parse_int(args.get('page'), 1)
    limit = parse_int(args.get(limit_key), default_limit)
    return {
        'page': max(1, page),
        'limit': min(max_limit, max(1, limit)),
    }
