"""
Write option parsing and loading.
"""

from .config_loader import WriteConfigBuilder, WriteConfigLoader
from .write_config import WriteConfig

__all__ = [
    "WriteConfig",
    "WriteConfigBuilder",
    "WriteConfigLoader",
]
