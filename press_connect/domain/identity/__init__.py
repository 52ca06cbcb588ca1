from .identity_domain import AuthResult, IdentityService, SessionClaims
from .user_store import UserStore

__all__ = ["AuthResult", "IdentityService", "SessionClaims", "UserStore"]
