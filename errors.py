"""
PM Bot - Errors
Failure categories shared by the handlers, the digest, and the transport glue.
"""


class ConfigurationError(Exception):
    """A required credential or identifier is missing."""


class ValidationError(Exception):
    """Malformed user input. The message is the corrective prompt to show."""


class TrackerApiError(Exception):
    """GitHub answered with an error status."""

    CATEGORIES = {
        401: "unauthorized",
        403: "forbidden",
        404: "not_found",
        422: "unprocessable",
    }

    def __init__(self, status, message, url=None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.url = url

    @property
    def category(self):
        return self.CATEGORIES.get(self.status, "other")

    def __str__(self):
        if self.status is None:
            return self.message
        return f"{self.status} {self.message}"


class TransportError(Exception):
    """Sending a message through Telegram failed."""

    def __init__(self, kind, description, chat_id=None):
        super().__init__(description)
        self.kind = kind  # "topic_closed", "chat_not_found" or "other"
        self.description = description
        self.chat_id = chat_id
