"""Forward forum notifications to linked Pushbullet accounts."""

__version__ = "0.1.0"
