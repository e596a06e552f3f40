"""Configuration loading utilities."""

import logging
import os
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml
from pydantic import ValidationError

from secret_files.config.models import SecretFilesConfig
from secret_files.provision import (
    FileOption,
    FileProvisioner,
    add_args,
    at_fixed_path,
    field_as_file,
    filename,
    set_output_dir_as_env_var,
    set_path_as_env_var,
    temp_file,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = ".secret-files/config.yaml"


class ConfigLoadError(Exception):
    """Raised when configuration cannot be loaded or validated."""

    pass


def load_config(config_path: Optional[str] = None) -> SecretFilesConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to configuration file. If None, defaults to
                    .secret-files/config.yaml in current directory.

    Returns:
        Validated SecretFilesConfig instance

    Raises:
        ConfigLoadError: If file not found, invalid YAML, or validation fails
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    config_file = Path(config_path)

    if not config_file.exists():
        raise ConfigLoadError(
            f"Configuration file not found: {config_path}\n"
            f"Run 'secret-files init' to create an example."
        )

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigLoadError(f"Failed to read {config_path}: {e}") from e

    if config_data is None:
        raise ConfigLoadError(f"Configuration file is empty: {config_path}")

    if not isinstance(config_data, dict):
        raise ConfigLoadError(f"Configuration must be a mapping: {config_path}")

    try:
        config = SecretFilesConfig(**config_data)
    except ValidationError as e:
        raise ConfigLoadError(f"Configuration validation failed:\n{e}") from e

    for spec in config.files:
        if spec.field not in config.fields:
            raise ConfigLoadError(
                f"File '{spec.name}' references undeclared field '{spec.field}'"
            )

    return config


def create_example_config(output_path: str = DEFAULT_CONFIG_PATH) -> None:
    """Create an example configuration file.

    Args:
        output_path: Where to write the example config

    Raises:
        ConfigLoadError: If file cannot be written
    """
    example_config = {
        "fields": {
            "kubeconfig": {"env": "KUBECONFIG_CONTENTS"},
            "credentials": {"file": "~/.config/example/credentials.json"},
        },
        "files": [
            {
                "name": "kube",
                "field": "kubeconfig",
                "filename": "config",
                "path_env_var": "KUBECONFIG",
            },
            {
                "name": "credentials",
                "field": "credentials",
                "args": ["--credentials={{ .Path }}"],
            },
        ],
    }

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(output_file, "w", encoding="utf-8") as f:
            yaml.dump(example_config, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise ConfigLoadError(f"Failed to write example config to {output_path}: {e}") from e


def resolve_item_fields(
    config: SecretFilesConfig, environ: Optional[Mapping[str, str]] = None
) -> Dict[str, str]:
    """Read the values of all configured fields.

    Fields whose source is unavailable are left out; the provisioner that
    needs them reports the missing field.

    Args:
        config: Loaded configuration
        environ: Environment to read from (defaults to os.environ)

    Returns:
        Field values by field name
    """
    if environ is None:
        environ = os.environ

    values: Dict[str, str] = {}
    for name, source in config.fields.items():
        if source.env is not None:
            if source.env in environ:
                values[name] = environ[source.env]
            else:
                logger.warning(f"Environment variable {source.env} not set (field: {name})")
        else:
            path = Path(source.file).expanduser()
            try:
                # Bytes first: text mode would rewrite "\r\n" line endings
                values[name] = path.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning(f"Cannot read {path} (field: {name}): {e}")
    return values


def build_provisioners(config: SecretFilesConfig) -> List[FileProvisioner]:
    """Create one file provisioner per configured file, in order."""
    provisioners: List[FileProvisioner] = []
    for spec in config.files:
        opts: List[FileOption] = []
        if spec.fixed_path:
            opts.append(at_fixed_path(str(Path(spec.fixed_path).expanduser())))
        if spec.filename:
            opts.append(filename(spec.filename))
        if spec.path_env_var:
            opts.append(set_path_as_env_var(spec.path_env_var))
        if spec.dir_env_var:
            opts.append(set_output_dir_as_env_var(spec.dir_env_var))
        if spec.args is not None:
            opts.append(add_args(*spec.args))
        provisioners.append(temp_file(field_as_file(spec.field), *opts))
    return provisioners
