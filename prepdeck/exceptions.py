"""Errors raised by the prepdeck services and translated by the routers."""


class CVAnalysisError(Exception):
    """The remote AI endpoint failed to analyze a CV."""


class SearchApiError(Exception):
    """A Tavily request returned a non-success status."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class PracticeSessionError(Exception):
    """A navigator operation was not valid for the session's state."""


class ProfileStoreError(Exception):
    """Saving or deleting a stored CV failed."""
