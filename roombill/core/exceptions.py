"""Domain exceptions raised outside the HTTP layer."""


class BillingConfigurationError(ValueError):
    """A room's pricing configuration cannot be billed.

    Raised by the pure calculator, which has no notion of HTTP. The
    application maps it to a 400 response; batch generation reports it
    per room instead.
    """

    def __init__(self, message: str, room_id: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.room_id = room_id
