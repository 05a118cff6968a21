"""
Realtime module exceptions.
"""

from shared.exceptions import AuthorizationError, ValidationError


class InvalidChannelError(ValidationError):
    """Raised when a channel name is not ``workspace:<id>`` or ``user:<id>``."""

    def __init__(self, channel: str):
        super().__init__(
            "invalid_channel",
            code="INVALID_CHANNEL",
            details={"channel": channel},
        )


class ChannelForbiddenError(AuthorizationError):
    """Raised when a connection may not subscribe to a channel."""

    def __init__(self, channel: str):
        super().__init__(
            "forbidden_channel",
            code="CHANNEL_FORBIDDEN",
            details={"channel": channel},
        )
