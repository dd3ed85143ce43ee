"""Notification sink and confirmation prompt interfaces."""

import logging
from typing import Awaitable, Callable, Optional, Protocol

logger = logging.getLogger(__name__)


ConfirmPrompt = Callable[[str], Awaitable[bool]]
"""Ask the user to accept or cancel; resolves to True when accepted."""


class Notifier(Protocol):
    """Fire-and-forget user feedback."""
    
    def success(self, message: str, description: Optional[str] = None) -> None:
        ...
    
    def error(self, message: str, description: Optional[str] = None) -> None:
        ...
    
    def info(self, message: str, description: Optional[str] = None) -> None:
        ...


class LoggingNotifier:
    """Notifier that writes user-facing messages to a logger."""
    
    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger
    
    def success(self, message: str, description: Optional[str] = None) -> None:
        self.log.info(_join(message, description))
    
    def error(self, message: str, description: Optional[str] = None) -> None:
        self.log.error(_join(message, description))
    
    def info(self, message: str, description: Optional[str] = None) -> None:
        self.log.info(_join(message, description))


def _join(message: str, description: Optional[str]) -> str:
    return f"{message} ({description})" if description else message


async def always_confirm(message: str) -> bool:
    """Confirmation prompt that accepts every request."""
    logger.debug("Auto-confirming: %s", message)
    return True
