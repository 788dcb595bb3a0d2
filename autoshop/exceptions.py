"""
Domain exceptions raised by the business rules.
"""


class AutoShopError(Exception):
    """Base class for all business rule errors."""


class ValidationError(AutoShopError):
    """Input was rejected before any computation took place."""


class InvalidTransitionError(AutoShopError):
    """A status change is not allowed from the current state."""

    def __init__(self, current, target, message=None):
        self.current = getattr(current, "value", current)
        self.target = getattr(target, "value", target)
        super().__init__(
            message or f"Cannot change status from '{self.current}' to '{self.target}'"
        )
