from __future__ import annotations


class DashboardLoadError(Exception):
    """One of the backend collections could not be fetched.

    The whole load is treated as failed; callers show ``str(exc)`` and render
    nothing else.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
