"""Configuration management for americano"""

import os
from pathlib import Path
from dotenv import load_dotenv


class Config:
    """Application configuration loaded from .env and environment variables"""

    def __init__(self):
        # Load .env file from project root
        env_path = Path(__file__).parent.parent / '.env'
        load_dotenv(env_path)

        # Polling
        self.poll_interval_seconds = self._parse_positive_int('AMERICANO_POLL_INTERVAL_SECONDS', '60')
        self.timer_interval_seconds = self._parse_positive_int('AMERICANO_TIMER_INTERVAL_SECONDS', '60')

        # Behavior
        self.prevent_display_sleep = self._parse_bool(os.getenv('AMERICANO_PREVENT_DISPLAY_SLEEP', 'false'))
        self.ignore_case = self._parse_bool(os.getenv('AMERICANO_IGNORE_CASE', 'false'))

        # Grace period before the inhibitor is killed outright
        self.stop_timeout_seconds = self._parse_float('AMERICANO_STOP_TIMEOUT_SECONDS', '1.0')

    def _parse_positive_int(self, name: str, default: str) -> int:
        """Parse a positive integer environment variable"""
        value = os.getenv(name, default)
        try:
            number = int(value)
        except ValueError:
            raise ValueError(f"Invalid value for {name}: {value}. Expected a whole number of seconds")
        if number <= 0:
            raise ValueError(f"Invalid value for {name}: {value}. Must be greater than zero")
        return number

    def _parse_float(self, name: str, default: str) -> float:
        value = os.getenv(name, default)
        try:
            number = float(value)
        except ValueError:
            raise ValueError(f"Invalid value for {name}: {value}. Expected a number of seconds")
        if number < 0:
            raise ValueError(f"Invalid value for {name}: {value}. Must not be negative")
        return number

    def _parse_bool(self, value: str) -> bool:
        """Parse boolean string"""
        return value.lower() in ('true', '1', 'yes', 'on')


# Global config instance
config = Config()
