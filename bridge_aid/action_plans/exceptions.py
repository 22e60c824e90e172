"""Custom exceptions for action-plan generation."""


class ActionPlanError(Exception):
    """Plan generation failed (HTTP error, timeout, unusable model reply).

    Raised by the LLM-backed generator; the fallback generator recovers from
    it per resource with the template plan.
    """

    def __init__(self, message: str, status_code: int = 0) -> None:
        super().__init__(message)
        self.status_code = status_code
