from enum import Enum


class UserRole(Enum):
    USER = "user"
    EDITOR = "editor"
    ADMIN = "admin"


class BookingStatus(Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class TravelClass(Enum):
    ECONOMY = "ECONOMY"
    PREMIUM_ECONOMY = "PREMIUM_ECONOMY"
    BUSINESS = "BUSINESS"
    FIRST = "FIRST"


class ContentType(Enum):
    ABOUT = "about"
    FAQ = "faq"
    TERMS = "terms"
    PRIVACY = "privacy"
    CONTACT = "contact"


class ContentStatus(Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
