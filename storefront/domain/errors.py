# storefront/domain/errors.py


class StorefrontError(Exception):
    """Base for everything the cart/order core raises on purpose."""


class ValidationError(StorefrontError):
    """A required field is missing or unusable. Mapped to 400."""


class MissingUser(ValidationError):
    def __init__(self, message: str = "Missing user_id"):
        super().__init__(message)


class EmptyOrder(ValidationError):
    def __init__(self, message: str = "items must be a non-empty list"):
        super().__init__(message)


class NotFound(StorefrontError):
    """Order or product absent. Mapped to 404."""


class PersistenceError(StorefrontError):
    """Storage failure, the client only ever sees a generic message."""
