"""
Pluggable key generation capability.
"""

from .base_key_generator import KeyGenerator
from .factory import (
    KEY_GENERATOR_REGISTRY,
    create_key_generator,
    register_key_generator,
    resolve_key_generator_class,
)

__all__ = [
    "KeyGenerator",
    "KEY_GENERATOR_REGISTRY",
    "create_key_generator",
    "register_key_generator",
    "resolve_key_generator_class",
]
