__all__ = ["RevokeSessionsJob", "classify_error", "invoke", "error", "halt"]

from .revoke_sessions import RevokeSessionsJob, classify_error, invoke, error, halt
