# core/exceptions.py

# ===== EXCEPTIONS =====

class DearSelfError(Exception):
    """Base exception for DearSelf errors"""
    pass

class ConfigError(DearSelfError):
    """Invalid or incomplete configuration"""
    pass

class StoreError(DearSelfError):
    """Remote store call failed (network or store error)"""
    pass

class AuthError(DearSelfError):
    """Sign-in, sign-up or token resolution failed"""
    pass

class ValidationError(DearSelfError):
    """Client-side validation failed, the write was not attempted"""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field

class ConfirmationRequired(DearSelfError):
    """Destructive action issued without explicit confirmation"""
    pass

class NotFoundError(DearSelfError):
    """Referenced row or pattern is not known to the panel"""
    pass
