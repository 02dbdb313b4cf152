"""
Error taxonomy for the booking bot and the early tee time checker.

Recoverable booking errors (QuantityUnavailable, StepFailed before the commit
point) are handled by the fallback controller and never end a run on their
own. Everything else propagates to the caller.
"""


class GolfBotError(Exception):
    """Base class for all bot errors."""


class InvalidDateFormat(GolfBotError):
    def __init__(self, raw: str) -> None:
        self.raw = raw
        super().__init__(f"Invalid date format: {raw!r}. Please use YYYY-MM-DD (e.g., 2025-10-31)")


class MissingCredentials(GolfBotError):
    def __init__(self, names: list[str]) -> None:
        self.names = list(names)
        super().__init__(f"Missing required environment variables: {', '.join(self.names)}")


class LoginFailed(GolfBotError):
    pass


class NoAvailability(GolfBotError):
    """
    No bookable slot was found for the date.

    ``ambiguous`` is True when neither the "no results" indicator nor any slot
    appeared before the timeout, so the page may simply not have loaded.
    """

    def __init__(self, target_date: str, ambiguous: bool = False) -> None:
        self.target_date = target_date
        self.ambiguous = ambiguous
        if ambiguous:
            message = (
                f"No tee times found for {target_date} before the timeout "
                "(page may not have loaded; availability unknown)"
            )
        else:
            message = f"No tee times available for {target_date}"
        super().__init__(message)


class DriverError(GolfBotError):
    """The UI driver could not perform an action."""


class DriverTimeout(DriverError):
    def __init__(self, what: str, timeout: float) -> None:
        self.what = what
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout:g}s waiting for {what}")


class QuantityUnavailable(GolfBotError):
    def __init__(self, quantity: int) -> None:
        self.quantity = quantity
        super().__init__(f"{quantity} player option not available")


class StepFailed(GolfBotError):
    """
    A checkout step failed.

    ``committed`` is True when the failure happened at or after the submit
    step, in which case the reservation may already exist.
    """

    def __init__(self, step: str, cause: Exception | str, committed: bool = False) -> None:
        self.step = step
        self.cause = cause
        self.committed = committed
        super().__init__(f"Step '{step}' failed: {cause}")


class AllQuantitiesExhausted(GolfBotError):
    def __init__(self, quantities: list[int]) -> None:
        self.quantities = list(quantities)
        tried = ", ".join(str(q) for q in self.quantities)
        super().__init__(f"Could not book for any player count (tried {tried})")


class CheckerError(GolfBotError):
    """The tee time API could not be queried."""


class AuthenticationExpired(CheckerError):
    pass


class AccessForbidden(CheckerError):
    pass


class RateLimited(CheckerError):
    pass
