from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from golfbot.exceptions import AllQuantitiesExhausted, NoAvailability, StepFailed

DEFAULT_QUANTITY_LADDER = (4, 3, 2, 1)


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True)

    identity: str = Field(..., min_length=1, description="Login email")
    secret: str = Field(..., min_length=1, repr=False, description="Login password")


class PaymentDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    card_number: str = Field(..., min_length=1, repr=False)
    exp_month: int = Field(default=12, ge=1, le=12)
    exp_year: int = Field(default=2027, ge=2000, le=2999)
    cvv: str = Field(..., min_length=1, repr=False)
    billing_address: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)
    country: str = Field(default="United States")


class BookingRequest(BaseModel):
    """Everything one booking run needs. Built once at the CLI boundary."""

    model_config = ConfigDict(frozen=True)

    target_date: date = Field(..., description="The date to book")
    credentials: Credentials
    payment: PaymentDetails
    quantity_ladder: tuple[int, ...] = Field(
        default=DEFAULT_QUANTITY_LADDER,
        description="Player counts to try, largest first",
    )
    course_id: int = Field(default=1241, description="Venue course id in the tee sheet URL")
    holes: int = Field(default=18)

    @field_validator("quantity_ladder")
    @classmethod
    def _check_ladder(cls, ladder: tuple[int, ...]) -> tuple[int, ...]:
        if not ladder:
            raise ValueError("quantity ladder must not be empty")
        if any(q < 1 for q in ladder):
            raise ValueError("quantity ladder entries must be positive")
        if any(a <= b for a, b in zip(ladder, ladder[1:])):
            raise ValueError("quantity ladder must be strictly decreasing")
        return ladder


class AvailabilityStatus(str, Enum):
    FOUND = "found"
    EMPTY = "empty"
    AMBIGUOUS = "ambiguous"


class CheckoutStep(str, Enum):
    """Checkout sub-steps in execution order."""

    QUANTITY_CHECK = "quantity_check"
    SELECT_QUANTITY = "select_quantity"
    ADD_TO_CART = "add_to_cart"
    CHECKOUT = "checkout"
    PAYMENT_DETAILS = "payment_details"
    ACCEPT_TERMS = "accept_terms"
    SUBMIT = "submit"
    CONFIRMATION = "confirmation"

    @property
    def is_post_commit(self) -> bool:
        return self in (CheckoutStep.SUBMIT, CheckoutStep.CONFIRMATION)


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    QUANTITY_UNAVAILABLE = "quantity_unavailable"
    STEP_FAILED = "step_failed"
    INDETERMINATE = "indeterminate"


class RunStatus(str, Enum):
    SUCCEEDED = "succeeded"
    NO_AVAILABILITY = "no_availability"
    ALL_QUANTITIES_EXHAUSTED = "all_quantities_exhausted"
    INDETERMINATE = "indeterminate"


@dataclass
class Slot:
    """A bookable tee time as rendered on the tee sheet. Valid for one run only."""

    handle: Any
    position: int


@dataclass
class AttemptResult:
    quantity: int
    outcome: AttemptOutcome
    step: CheckoutStep | None = None
    cause: str | None = None
    confirmed: bool = False

    def describe(self) -> str:
        if self.outcome == AttemptOutcome.SUCCESS:
            suffix = "" if self.confirmed else " (confirmation page not seen)"
            return f"{self.quantity} player(s): booked{suffix}"
        if self.outcome == AttemptOutcome.QUANTITY_UNAVAILABLE:
            return f"{self.quantity} player(s): option not available"
        step = self.step.value if self.step else "unknown"
        if self.outcome == AttemptOutcome.INDETERMINATE:
            return f"{self.quantity} player(s): failed at '{step}' after submit ({self.cause})"
        return f"{self.quantity} player(s): failed at '{step}' ({self.cause})"


@dataclass
class BookingOutcome:
    """Terminal result of a booking run, with one AttemptResult per ladder entry tried."""

    status: RunStatus
    target_date: date
    committed_quantity: int | None = None
    attempts: list[AttemptResult] = field(default_factory=list)
    message: str | None = None
    ambiguous: bool = False
    finished_at: datetime = field(default_factory=datetime.now)

    @property
    def succeeded(self) -> bool:
        successes = [a for a in self.attempts if a.outcome == AttemptOutcome.SUCCESS]
        return (
            self.status == RunStatus.SUCCEEDED
            and len(successes) == 1
            and self.attempts[-1] is successes[0]
        )

    @property
    def confirmed(self) -> bool:
        return self.succeeded and self.attempts[-1].confirmed

    def raise_for_status(self) -> None:
        """Raise the error matching a non-successful run."""
        if self.status == RunStatus.SUCCEEDED:
            return
        if self.status == RunStatus.NO_AVAILABILITY:
            raise NoAvailability(
                self.target_date.isoformat(),
                ambiguous=self.ambiguous,
            )
        if self.status == RunStatus.INDETERMINATE:
            last = self.attempts[-1] if self.attempts else None
            raise StepFailed(
                last.step.value if last and last.step else CheckoutStep.SUBMIT.value,
                (last.cause if last else None) or "unknown",
                committed=True,
            )
        raise AllQuantitiesExhausted([a.quantity for a in self.attempts])


@dataclass
class TeeTimeSlot:
    """A tee time returned by the partner REST API."""

    course_name: str
    start_time: datetime
    min_players: int | None = None
    max_players: int | None = None
    rate_name: str | None = None

    def describe(self) -> str:
        players = ""
        if self.min_players is not None and self.max_players is not None:
            players = f", {self.min_players}-{self.max_players} players"
        rate = f", {self.rate_name}" if self.rate_name else ""
        return f"{self.course_name} {self.start_time.strftime('%I:%M %p').lstrip('0')}{players}{rate}"


@dataclass
class DayAvailability:
    date: date
    slots: list[TeeTimeSlot]
    status: AvailabilityStatus = AvailabilityStatus.FOUND
