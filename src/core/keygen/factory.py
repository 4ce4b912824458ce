"""
Key generator selection and construction.

Classes are resolved once per batch on the driver, either from names
registered with ``register_key_generator`` or from a dotted import path,
and instantiated once per partition.
"""

import importlib
from typing import Mapping

from src.core.errors import KeyGeneratorConfigError
from src.observability.logger import get_logger

from .base_key_generator import KeyGenerator

logger = get_logger(__name__)

KEY_GENERATOR_REGISTRY: dict[str, type[KeyGenerator]] = {}


def register_key_generator(name: str, generator_class: type[KeyGenerator]) -> None:
    """
    Register a key generator under a short name.

    Raises:
        KeyGeneratorConfigError: If the class is not a KeyGenerator
    """
    if not isinstance(generator_class, type) or not issubclass(generator_class, KeyGenerator):
        raise KeyGeneratorConfigError(f"{generator_class!r} is not a KeyGenerator subclass")
    KEY_GENERATOR_REGISTRY[name] = generator_class


def resolve_key_generator_class(class_name: str | None) -> type[KeyGenerator]:
    """
    Resolve a key generator class by registered name or dotted path.

    Args:
        class_name: Registered name or ``package.module.ClassName``

    Returns:
        The KeyGenerator subclass

    Raises:
        KeyGeneratorConfigError: If the name is empty, unknown or not a KeyGenerator
    """
    if not class_name:
        raise KeyGeneratorConfigError("No key generator class configured")

    if class_name in KEY_GENERATOR_REGISTRY:
        return KEY_GENERATOR_REGISTRY[class_name]

    module_name, _, attr = class_name.rpartition(".")
    if not module_name:
        raise KeyGeneratorConfigError(f"Unknown key generator: {class_name}")

    try:
        module = importlib.import_module(module_name)
        generator_class = getattr(module, attr)
    except (ImportError, AttributeError) as e:
        raise KeyGeneratorConfigError(f"Cannot load key generator '{class_name}': {e}") from e

    if not isinstance(generator_class, type) or not issubclass(generator_class, KeyGenerator):
        raise KeyGeneratorConfigError(f"'{class_name}' is not a KeyGenerator subclass")
    return generator_class


def create_key_generator(
    generator_class: type[KeyGenerator],
    props: Mapping[str, str],
) -> KeyGenerator:
    """
    Instantiate a key generator from write properties.

    Raises:
        KeyGeneratorConfigError: If construction fails
    """
    try:
        generator = generator_class(props)
    except KeyGeneratorConfigError:
        raise
    except Exception as e:
        raise KeyGeneratorConfigError(
            f"Failed to create key generator {generator_class.__name__}: {e}"
        ) from e
    logger.debug(f"Created key generator {generator!r}")
    return generator
