"""
System components for kalimdor.
"""

from kalimdor.components.config import Config, ConfigManager
