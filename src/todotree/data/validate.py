import yaml
from pathlib import Path
from typing import Any, Dict, Union
from jsonschema import validate, ValidationError, SchemaError
from todotree.recovery import ConfigError
from todotree.logs import get_logger

log = get_logger("data.validate")

def load_yaml_file(file_path: Union[Path, str]) -> Dict[str, Any]:
    """
    Load a YAML mapping from disk.

    Raises:
        ConfigError: If the file can't be read, isn't YAML, or isn't a mapping.
    """
    file_path = Path(file_path)
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Failed to read file {file_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"File '{file_path}' is not valid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"File {file_path} contains invalid data structure")
    return data

def validate_data(data: Dict[str, Any], schema: Dict[str, Any], source: str = "<data>") -> Dict[str, Any]:
    """
    Validate ``data`` against a JSON schema.

    Args:
        data: The parsed document.
        schema: A JSON schema, typically from a pydantic model.
        source: Where the data came from, for error messages.

    Returns:
        The data unchanged when valid.

    Raises:
        ConfigError: If the data or the schema itself is invalid.
    """
    try:
        validate(instance=data, schema=schema)
    except ValidationError as e:
        log.error(f"'{source}' FAILED validation: {e.message}")
        raise ConfigError(f"{source}: {e.message}") from e
    except SchemaError as e:
        log.error(f"Schema for '{source}' is invalid: {e.message}")
        raise ConfigError(f"invalid schema for {source}: {e.message}") from e

    log.debug(f"'{source}' is valid")
    return data

def validate_file_schema(file_path: Union[Path, str], schema: Dict[str, Any]) -> Dict[str, Any]:
    """Load a YAML file and validate it against ``schema``."""
    return validate_data(load_yaml_file(file_path), schema, str(file_path))
