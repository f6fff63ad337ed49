class PersistenceError(Exception):
    """Backend reachable but the operation failed."""


class PersistenceUnavailable(PersistenceError):
    """Backend is not configured or cannot be reached."""


class AlreadySubscribed(Exception):
    """Insert hit the unique constraint on the subscription email."""

    def __init__(self, email: str):
        super().__init__(f"{email} is already subscribed")
        self.email = email
