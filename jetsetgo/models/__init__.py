from jetsetgo.models.user import User
from jetsetgo.models.booking import Booking
from jetsetgo.models.content import Content
from jetsetgo.models.feedback import Feedback
from jetsetgo.models.audit_log import AuditLog
from jetsetgo.models.revoked_tokens import RevokedToken
