from gogetajob.models.audit_log import AuditLog
from gogetajob.models.user_profile import UserProfile

__all__ = [
    "AuditLog",
    "UserProfile",
]
