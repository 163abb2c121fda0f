class PaymentError(Exception):
    """Base class for payment system exceptions."""

    pass


class InvalidTransitionError(PaymentError):
    """Raised when a purchase request is moved out of a state that does not allow it."""

    def __init__(self, current: str, target: str):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move a {current} request to {target}")
