"""Core modules for the chat bot."""

from .bot import ChatBot
from .config import (
    DEFAULT_IRC_HOST,
    DEFAULT_IRC_PORT,
    TAGS_CAPABILITY,
    get_settings,
    validate_env_vars,
)
from .dispatch import CommandDispatcher
from .guards import CooldownTracker
from .health_server import HealthCheckServer
from .logging import setup_logging
from .parser import parse_message, parse_parameters
from .transport import IrcConnection

__all__ = [
    # Settings
    "get_settings",
    "validate_env_vars",
    # Protocol Constants
    "DEFAULT_IRC_HOST",
    "DEFAULT_IRC_PORT",
    "TAGS_CAPABILITY",
    # Setup functions
    "setup_logging",
    # Services
    "ChatBot",
    "HealthCheckServer",
    "IrcConnection",
    # Parsing and dispatch
    "parse_message",
    "parse_parameters",
    "CommandDispatcher",
    # Guards
    "CooldownTracker",
]
