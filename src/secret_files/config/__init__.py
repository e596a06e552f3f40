"""Configuration module for secret-files."""

from secret_files.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigLoadError,
    build_provisioners,
    create_example_config,
    load_config,
    resolve_item_fields,
)
from secret_files.config.models import (
    FieldSource,
    FileSpec,
    SecretFilesConfig,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigLoadError",
    "FieldSource",
    "FileSpec",
    "SecretFilesConfig",
    "build_provisioners",
    "create_example_config",
    "load_config",
    "resolve_item_fields",
]
