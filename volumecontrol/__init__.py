"""Sound theme, speaker test and volume status logic for desktop volume controls."""

__version__ = "1.12.1"
__all__ = ["channels", "themefiles", "themes", "chooser", "speakertest", "dock", "statusicon"]