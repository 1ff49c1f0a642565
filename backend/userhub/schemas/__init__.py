from .user import CreateUserPayload, UserPage, UserRead

__all__ = ["CreateUserPayload", "UserPage", "UserRead"]
