"""
Authentication validation schemas
Provides validation for registration, login and profile endpoints
"""
from typing import Optional, Dict, Any, Tuple

from jetsetgo.models.enums import TravelClass
from jetsetgo.utils.validation import (
    validate_email_format, validate_password_strength, validate_phone
)

PREFERENCE_KEYS = ('seatType', 'mealPreference', 'preferredAirlines', 'preferredClass')
MIN_PASSWORD_LENGTH = 8


def _check_password(password: str) -> Optional[str]:
    if not password:
        return 'Password is required'
    if not isinstance(password, str):
        return 'Password must be a string'
    if len(password) < MIN_PASSWORD_LENGTH:
        return f'Password must be at least {MIN_PASSWORD_LENGTH} characters'
    if not validate_password_strength(password):
        return 'Password must contain at least one letter and one number'
    return None


class AuthSchemas:
    """Validation schemas for authentication endpoints"""

    @staticmethod
    def validate_registration(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """
        Validate user registration data

        Args:
            data: Dictionary containing registration data

        Returns:
            Tuple of (is_valid, errors, cleaned_data)
        """
        errors = {}
        cleaned_data = {}

        name = str(data.get('name') or '').strip()
        if not name:
            errors['name'] = 'Name is required'
        elif len(name) < 2:
            errors['name'] = 'Name must be at least 2 characters'
        elif len(name) > 100:
            errors['name'] = 'Name must be at most 100 characters'
        else:
            cleaned_data['name'] = name

        # Email validation
        email = str(data.get('email') or '').strip().lower()
        if not email:
            errors['email'] = 'Email is required'
        elif not validate_email_format(email):
            errors['email'] = 'Invalid email format'
        else:
            cleaned_data['email'] = email

        password = data.get('password') or ''
        password_error = _check_password(password)
        if password_error:
            errors['password'] = password_error
        else:
            cleaned_data['password'] = password

        # Confirmation is optional, but must match when sent
        confirm_password = data.get('confirmPassword')
        if confirm_password is not None and confirm_password != password:
            errors['confirmPassword'] = 'Passwords do not match'

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, cleaned_data if is_valid else None

    @staticmethod
    def validate_login(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """
        Validate user login data

        Args:
            data: Dictionary containing login data

        Returns:
            Tuple of (is_valid, errors, cleaned_data)
        """
        errors = {}
        cleaned_data = {}

        # Email validation
        email = str(data.get('email') or '').strip().lower()
        if not email:
            errors['email'] = 'Email is required'
        elif not validate_email_format(email):
            errors['email'] = 'Invalid email format'
        else:
            cleaned_data['email'] = email

        # Password validation
        password = data.get('password') or ''
        if not password:
            errors['password'] = 'Password is required'
        elif not isinstance(password, str):
            errors['password'] = 'Password must be a string'
        else:
            cleaned_data['password'] = password

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, cleaned_data if is_valid else None

    @staticmethod
    def validate_profile_update(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        """
        Validate a partial profile update. Only keys present in the body are
        returned in cleaned_data.
        """
        errors = {}
        cleaned_data = {}

        if 'name' in data:
            name = str(data.get('name') or '').strip()
            if len(name) < 2:
                errors['name'] = 'Name must be at least 2 characters'
            else:
                cleaned_data['name'] = name

        if 'email' in data:
            email = str(data.get('email') or '').strip().lower()
            if not validate_email_format(email):
                errors['email'] = 'Invalid email format'
            else:
                cleaned_data['email'] = email

        if 'phone' in data:
            phone = str(data.get('phone') or '').strip()
            if phone and not validate_phone(phone):
                errors['phone'] = 'Invalid phone number format'
            else:
                cleaned_data['phone'] = phone or None

        if 'address' in data:
            address = str(data.get('address') or '').strip()
            if len(address) > 255:
                errors['address'] = 'Address must be at most 255 characters'
            else:
                cleaned_data['address'] = address or None

        if 'preferences' in data:
            preferences = data.get('preferences')
            if not isinstance(preferences, dict):
                errors['preferences'] = 'Preferences must be an object'
            else:
                unknown = [key for key in preferences if key not in PREFERENCE_KEYS]
                invalid = [key for key, value in preferences.items()
                           if key in PREFERENCE_KEYS and not _is_preference_value(key, value)]
                preferred_class = preferences.get('preferredClass')
                if unknown:
                    errors['preferences'] = f'Unknown preference(s): {", ".join(sorted(unknown))}'
                elif invalid:
                    errors['preferences'] = f'Invalid value for: {", ".join(sorted(invalid))}'
                elif preferred_class and not _is_travel_class(preferred_class):
                    errors['preferences'] = 'preferredClass must be a valid travel class'
                else:
                    cleaned_data['preferences'] = {
                        key: _clean_preference_value(value)
                        for key, value in preferences.items()
                    }

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, cleaned_data if is_valid else None

    @staticmethod
    def validate_password_change(data: Dict[str, Any]) -> Tuple[bool, Optional[Dict[str, str]], Optional[Dict[str, Any]]]:
        errors = {}
        cleaned_data = {}

        current_password = data.get('currentPassword') or ''
        if not current_password:
            errors['currentPassword'] = 'Current password is required'
        elif not isinstance(current_password, str):
            errors['currentPassword'] = 'Current password must be a string'
        else:
            cleaned_data['current_password'] = current_password

        new_password = data.get('newPassword') or ''
        password_error = _check_password(new_password)
        if password_error:
            errors['newPassword'] = password_error
        elif new_password == current_password:
            errors['newPassword'] = 'New password must differ from the current one'
        else:
            cleaned_data['new_password'] = new_password

        is_valid = len(errors) == 0
        return is_valid, errors if not is_valid else None, cleaned_data if is_valid else None


def _is_preference_value(key: str, value: Any) -> bool:
    """Strings or null; preferredAirlines may also be a list of strings"""
    if value is None or isinstance(value, str):
        return True
    if key == 'preferredAirlines' and isinstance(value, list):
        return all(isinstance(item, str) for item in value)
    return False


def _clean_preference_value(value: Any) -> Any:
    if isinstance(value, list):
        return [item.strip() for item in value if item.strip()]
    return value.strip() if value is not None else None


def _is_travel_class(value: str) -> bool:
    normalized = str(value).strip().upper().replace(' ', '_')
    return normalized in TravelClass.__members__
