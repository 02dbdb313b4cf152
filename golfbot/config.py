from enum import Enum

from pydantic_settings import BaseSettings


class WaitMode(str, Enum):
    """How the driver settles the page after a mutating action."""

    FIXED = "fixed"
    EVENT_DRIVEN = "event_driven"
    HYBRID = "hybrid"


class DefaultDatePolicy(str, Enum):
    """Rule used to pick the target date when none is given."""

    DAYS_AHEAD = "days_ahead"
    NEXT_WEEKDAY = "next_weekday"


class Settings(BaseSettings):
    golf_email: str = ""
    golf_password: str = ""

    credit_card: str = ""
    card_exp_month: int = 12
    card_exp_year: int = 2027
    cvv: str = ""
    billing_address: str = ""
    postal_code: str = ""
    billing_country: str = "United States"

    target_date: str = ""

    teeitup_base_url: str = "https://lomas-santa-fe-executive-golf-course.book.teeitup.com"
    course_id: int = 1241
    holes: int = 18
    quantity_ladder: list[int] = [4, 3, 2, 1]

    timezone: str = "America/Los_Angeles"
    default_date_policy: DefaultDatePolicy = DefaultDatePolicy.DAYS_AHEAD
    days_in_advance: int = 7
    # Monday == 0, Friday == 4
    default_weekday: int = 4

    wait_mode: WaitMode = WaitMode.HYBRID
    probe_timeout_seconds: float = 5.0
    mutation_timeout_seconds: float = 10.0
    navigation_timeout_seconds: float = 10.0
    confirmation_timeout_seconds: float = 10.0

    headless: bool = True
    chromedriver_path: str = ""

    jc_golf_bearer_token: str = ""
    jc_golf_api_base_url: str = (
        "https://jcplayer5.cps.golf/onlineres/onlineapi/api/v1/onlinereservation"
    )
    course_ids: str = "22,6"
    class_code: str = "JCPWE"
    member_store_id: str = "5"
    search_days_ahead: int = 14
    max_tee_hour: int = 7
    request_delay_seconds: float = 2.0
    rate_limit_delay_seconds: float = 5.0

    twilio_account_sid: str = ""
    twilio_auth_token: str = ""
    twilio_phone_number: str = ""
    notify_phone_number: str = ""

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    def booking_secrets(self) -> dict[str, str]:
        """Secrets that must be present before a booking session is opened."""
        return {
            "GOLF_EMAIL": self.golf_email,
            "GOLF_PASSWORD": self.golf_password,
            "CREDIT_CARD": self.credit_card,
            "CVV": self.cvv,
            "BILLING_ADDRESS": self.billing_address,
            "POSTAL_CODE": self.postal_code,
        }

    def checker_secrets(self) -> dict[str, str]:
        return {"JC_GOLF_BEARER_TOKEN": self.jc_golf_bearer_token}


settings = Settings()
