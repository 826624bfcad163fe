"""Custom exceptions for the Notion MCP server."""


class NotionMCPException(Exception):
    """Base class for server exceptions."""

    def __init__(self, message: str = "Notion MCP error"):
        self.message = message
        super().__init__(message)


class ConfigurationError(NotionMCPException):
    """Raised when required configuration is missing.

    Fatal: the server cannot serve any tool without a credential.
    """


class NotionAPIError(NotionMCPException):
    """Raised when Notion answers with a non-success status.

    Carries the status code, status text and the raw response body so the
    caller sees exactly what the API reported.
    """

    def __init__(self, status_code: int, status_text: str = "", body: str = ""):
        self.status_code = status_code
        self.status_text = status_text
        self.body = body
        super().__init__(
            f"Notion API error ({status_code} {status_text}): {body}"
        )


class ThrottleRetriesExhaustedError(NotionAPIError):
    """Raised when a configured 429 retry cap is exceeded.

    Never raised with the default (uncapped) throttle policy.
    """

    def __init__(self, retries: int, status_text: str = "Too Many Requests", body: str = ""):
        self.retries = retries
        super().__init__(429, status_text, body)
