"""Raise PHP and WordPress upload/memory limits on an Apache host."""

APP_NAME: str = "WP Limit Fixer"
APP_SUBTITLE: str = "PHP & WordPress Upload Limits"
VERSION: str = "1.0.0"

__version__ = VERSION
