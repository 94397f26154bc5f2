class StravaToolsError(Exception):
    """Base class for every error raised by strava_tools."""


class ConfigurationError(StravaToolsError, ValueError):
    """Credentials needed for a request are missing."""


class HTTPError(StravaToolsError):
    """A failed call to Strava, keeping the status code and response body."""

    def __init__(self, message, status_code=None, body=''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self):
        if self.status_code is None:
            return self.args[0]
        return f"{self.args[0]}: {self.status_code} - {self.body}"


class AuthError(HTTPError):
    """The token endpoint rejected a refresh or code exchange."""


class ApiError(HTTPError):
    """Non-200 response (or unreadable body) from the activities API."""


class NetworkError(ApiError):
    """The request never got a response (timeout, DNS, refused connection)."""


class NotFoundError(StravaToolsError):
    """An empty result where exactly one item was required."""


class EmptyUpdateError(StravaToolsError, ValueError):
    """An activity update with no populated fields."""
