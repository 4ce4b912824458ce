"""
Write option configuration management.

Loads flat write options from YAML files and provides a builder for
assembling option maps in code.
"""

from pathlib import Path
from typing import Any

import yaml

from . import write_config as keys
from .write_config import WriteConfig, _stringify


class WriteConfigLoader:
    """
    Loads write options from YAML configuration files.

    Expected YAML format:
    ```yaml
    options:
      hoodie.datasource.write.operation: upsert
      hoodie.datasource.write.precombine.field: ts
      hoodie.datasource.write.recordkey.field: id
      hoodie.datasource.write.keygenerator.class: my_keygens.RegionKeyGenerator
      hoodie.datasource.write.drop.partition.columns: true
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the write config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Write configuration file not found: {config_path}")

    def load_options(self) -> dict[str, str]:
        """
        Load the flat option map from the YAML file.

        Returns:
            Option keys to string values (booleans rendered as "true"/"false")

        Raises:
            ValueError: If YAML is missing the options section or it is not a mapping
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or "options" not in config:
            raise ValueError("Configuration file must contain 'options' section")

        options = config["options"]
        if not isinstance(options, dict):
            raise ValueError("'options' section must be a mapping of option keys to values")

        parsed = {}
        for key, value in options.items():
            if value is None:
                raise ValueError(f"Option '{key}' has no value")
            if isinstance(value, (dict, list)):
                raise ValueError(f"Option '{key}' must be a scalar, got {type(value).__name__}")
            parsed[str(key)] = _stringify(value)
        return parsed

    def load(self, overrides: dict[str, Any] | None = None) -> WriteConfig:
        """Load options and parse them, applying per-batch overrides on top."""
        options = self.load_options()
        if overrides:
            options.update({key: _stringify(value) for key, value in overrides.items()})
        return WriteConfig.from_options(options)


class WriteConfigBuilder:
    """
    Programmatically build write options (for testing or job wiring).
    """

    def __init__(self):
        """Initialize empty option map."""
        self.options: dict[str, str] = {}

    def set(self, key: str, value: Any) -> "WriteConfigBuilder":
        """Set an arbitrary option."""
        self.options[key] = _stringify(value)
        return self

    def operation(self, operation: str) -> "WriteConfigBuilder":
        return self.set(keys.OPERATION, operation)

    def prepped(self, enabled: bool = True) -> "WriteConfigBuilder":
        return self.set(keys.PREPPED, enabled)

    def sql_merge_into_prepped(self, enabled: bool = True) -> "WriteConfigBuilder":
        return self.set(keys.SQL_MERGE_INTO_PREPPED, enabled)

    def drop_partition_columns(self, enabled: bool = True) -> "WriteConfigBuilder":
        return self.set(keys.DROP_PARTITION_COLUMNS, enabled)

    def combine_before_insert(self, enabled: bool = True) -> "WriteConfigBuilder":
        return self.set(keys.COMBINE_BEFORE_INSERT, enabled)

    def combine_before_upsert(self, enabled: bool = True) -> "WriteConfigBuilder":
        return self.set(keys.COMBINE_BEFORE_UPSERT, enabled)

    def insert_drop_duplicates(self, enabled: bool = True) -> "WriteConfigBuilder":
        return self.set(keys.INSERT_DROP_DUPS, enabled)

    def precombine_field(self, field_name: str) -> "WriteConfigBuilder":
        return self.set(keys.PRECOMBINE_FIELD, field_name)

    def consistent_logical_timestamp(self, enabled: bool = True) -> "WriteConfigBuilder":
        return self.set(keys.CONSISTENT_LOGICAL_TIMESTAMP, enabled)

    def payload_class(self, class_name: str) -> "WriteConfigBuilder":
        return self.set(keys.PAYLOAD_CLASS_NAME, class_name)

    def key_generator(self, class_name: str, record_key_field: str | None = None) -> "WriteConfigBuilder":
        """Select the key generator; leave record_key_field unset for auto-generated keys."""
        self.set(keys.KEY_GENERATOR_CLASS, class_name)
        if record_key_field is not None:
            self.set(keys.RECORDKEY_FIELD, record_key_field)
        return self

    def instant_time(self, instant_time: str) -> "WriteConfigBuilder":
        return self.set(keys.INSTANT_TIME, instant_time)

    def row_format(self, row_format: str) -> "WriteConfigBuilder":
        return self.set(keys.ROW_FORMAT, row_format)

    def build(self) -> dict[str, str]:
        """Return a copy of the option map."""
        return dict(self.options)

    def build_config(self) -> WriteConfig:
        return WriteConfig.from_options(self.options)
