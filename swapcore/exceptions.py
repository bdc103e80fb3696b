"""
Domain errors raised by the lifecycle services.

All of them are ValueError subclasses so callers that only care about
"the request was rejected" can keep catching ValueError.
"""


class LifecycleError(ValueError):
    """Base class for rejected lifecycle operations."""


class UnknownUser(LifecycleError):
    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class NotConnected(LifecycleError):
    def __init__(self, user_id: int, partner_id: int):
        super().__init__(f"User {user_id} is not connected with user {partner_id}")
        self.user_id = user_id
        self.partner_id = partner_id


class InvalidTransition(LifecycleError):
    def __init__(self, current: str, requested: str):
        super().__init__(f"Invalid transition: {current} -> {requested}")
        self.current = current
        self.requested = requested


class AlreadyRated(LifecycleError):
    pass


class NotCompleted(LifecycleError):
    pass
