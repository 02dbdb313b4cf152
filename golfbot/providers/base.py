from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

ElementHandle = Any


class UIDriver(ABC):
    """
    Abstract browser automation capability used by the booking flow.

    Elements are addressed by a stable identifier (a CSS selector built on the
    venue's data-testid / aria-label attributes, or an XPath starting with
    "//"). Every wait takes an explicit upper bound in seconds.
    """

    @abstractmethod
    def launch(self) -> None:
        """Start the browser session."""
        pass

    @abstractmethod
    def navigate(self, url: str) -> None:
        pass

    @abstractmethod
    def locate(self, stable_id: str, timeout: float) -> ElementHandle:
        """Return the first visible element, or raise DriverTimeout."""
        pass

    @abstractmethod
    def locate_all(self, stable_id: str, timeout: float) -> list[ElementHandle]:
        """Return all matching elements in rendered order, or [] on timeout."""
        pass

    @abstractmethod
    def is_present(self, stable_id: str) -> bool:
        """Check, without waiting, whether a visible element matches."""
        pass

    @abstractmethod
    def is_enabled(self, handle: ElementHandle) -> bool:
        pass

    @abstractmethod
    def click(self, handle: ElementHandle) -> None:
        pass

    @abstractmethod
    def fill(self, handle: ElementHandle, value: str) -> None:
        pass

    @abstractmethod
    def check(self, handle: ElementHandle) -> None:
        pass

    @abstractmethod
    def choose_option(self, stable_id: str, option_text: str, timeout: float) -> None:
        """Open the combobox at ``stable_id`` and pick the option labelled ``option_text``."""
        pass

    @abstractmethod
    def wait_for(self, predicate: Callable[[], bool], timeout: float) -> bool:
        """Poll ``predicate`` until it is true or ``timeout`` elapses."""
        pass

    @abstractmethod
    def current_url(self) -> str:
        pass

    @abstractmethod
    def go_back(self) -> None:
        pass

    @abstractmethod
    def close(self) -> None:
        pass

    def capture_diagnostics(self, context: str) -> None:
        """Save whatever debugging artefacts the driver can produce. No-op by default."""
        return None
