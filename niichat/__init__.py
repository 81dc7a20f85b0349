"""niichat: Twitch IRC chat bot with file-defined commands and cooldowns."""

__version__ = "0.1.0"
