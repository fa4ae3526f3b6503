"""Errors raised by the account service; the API layer maps them to HTTP responses."""


class AccountError(Exception):
    """Base class for account management failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class UserNotFoundError(AccountError):
    """Raised when a lookup by id or username matches no user."""

    def __init__(self, username: str | None = None, user_id: int | None = None) -> None:
        self.username = username
        self.user_id = user_id
        if username is not None:
            message = f"User '{username}' not found"
        else:
            message = f"User with id {user_id} not found"
        super().__init__(message)


class RoleNotFoundError(AccountError):
    """Raised when a role name is not present in the role store."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Role '{name}' not found")


class UsernameConflictError(AccountError):
    """Raised when a username is already held by another user."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Username '{username}' is already taken")
