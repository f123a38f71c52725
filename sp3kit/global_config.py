"""
Global Configuration Module

This module provides a centralized configuration storage for SP3 reading and
satellite interpolation settings that can be accessed by all functions
throughout the package.
"""

from typing import Dict, Any
from dataclasses import dataclass, field


@dataclass
class ReaderSettings:
    """
    Settings used while parsing SP3 headers.
    """
    # Upper bound on accuracy ('++') and comment ('/*') lines, guards against
    # runaway loops on malformed files
    max_header_lines: int = 1000

    # Tolerance when validating the start epoch against the declared GPS seconds-of-week [s]
    sow_tolerance: float = 1e-9

    # Tolerance when validating the start epoch against the declared fractional day [day]
    fractional_day_tolerance: float = 1e-12


@dataclass
class InterpolationSettings:
    """
    Settings used by SvInterpolator.
    """
    # Use data points up to this many seconds away (on each side) from the requested epoch
    max_lookaround_seconds: float = 181.0

    # Minimum number of data points required on each side of the requested epoch
    min_points_per_side: int = 2


@dataclass
class GlobalConfig:
    """
    Global configuration container for the entire package.
    """
    reader: ReaderSettings = field(default_factory=ReaderSettings)
    interpolation: InterpolationSettings = field(default_factory=InterpolationSettings)

    def get_settings(self, section: str):
        """
        Get settings for the specified section.

        Args:
            section: Either 'READER' or 'INTERPOLATION'

        Returns:
            The settings dataclass for the section
        """
        if section.upper() == 'READER':
            return self.reader
        elif section.upper() == 'INTERPOLATION':
            return self.interpolation
        else:
            raise ValueError(f"Invalid settings section: {section}. Use 'READER' or 'INTERPOLATION'")

    def update_settings(self, section: str, settings: Dict[str, Any]) -> None:
        """
        Update settings for the specified section.

        Only keys that exist on the section are updated; others are ignored.
        """
        target = self.get_settings(section)

        for key, value in settings.items():
            if hasattr(target, key):
                setattr(target, key, value)

    def reset(self) -> None:
        """Restore every section to its defaults."""
        self.reader = ReaderSettings()
        self.interpolation = InterpolationSettings()


# Create a singleton instance of GlobalConfig that can be imported and used globally
global_config = GlobalConfig()


def get_global_config() -> GlobalConfig:
    """
    Get the global configuration instance.

    Returns:
        GlobalConfig instance
    """
    return global_config


def get_reader_settings() -> ReaderSettings:
    """Convenience function to get reader settings."""
    return global_config.reader


def get_interpolation_settings() -> InterpolationSettings:
    """Convenience function to get interpolation settings."""
    return global_config.interpolation


def update_reader_settings(settings: Dict[str, Any]) -> None:
    """Convenience function to update reader settings."""
    global_config.update_settings('READER', settings)


def update_interpolation_settings(settings: Dict[str, Any]) -> None:
    """Convenience function to update interpolation settings."""
    global_config.update_settings('INTERPOLATION', settings)
