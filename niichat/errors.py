"""Exception types for the chat bot."""


class NiichatError(Exception):
    """Base class for all bot errors."""


class ConfigurationError(NiichatError):
    """Startup configuration is missing or invalid. The bot cannot start."""


class CommandConfigError(ConfigurationError):
    """The commands file cannot be read, decoded or validated."""


class TransportError(NiichatError):
    """Connecting to, handshaking with, or writing to the chat server failed."""
