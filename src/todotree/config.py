"""
Configuration for todotree.

Settings come from, in increasing precedence: built-in defaults, the YAML
config file, the TODOTREE_FILE environment variable and explicit arguments.
"""
import os
from pathlib import Path
from typing import Optional, Union
from pydantic import ConfigDict, Field, ValidationError
from todotree.models import BaseYAMLModel
from todotree.recovery import ConfigError
from todotree.data.validate import validate_file_schema
from todotree.logs import get_logger

log = get_logger("config")

USER_DATA_DIR = Path.home() / ".local" / "share" / "todotree"
DEFAULT_CONFIG_FILE = USER_DATA_DIR / "config.yml"
DEFAULT_TODO_FILE = Path("todo.txt")

class TodoTreeConfig(BaseYAMLModel):
    """User settings for locating and saving the todo file."""

    model_config = ConfigDict(extra='forbid')

    todo_file: Path = Field(default=DEFAULT_TODO_FILE, description="The todo.txt file to operate on")
    atomic_save: bool = Field(default=True, description="Write to a temp file and rename it over the target")
    stamp_completion: bool = Field(default=True, description="Record today's date when a task is completed")

def config_file_path() -> Path:
    return Path(os.getenv('TODOTREE_CONFIG', DEFAULT_CONFIG_FILE)).expanduser()

def load_config(todo_file: Union[Path, str, None] = None, config_file: Union[Path, str, None] = None) -> TodoTreeConfig:
    """Resolve the effective configuration."""
    path = Path(config_file).expanduser() if config_file else config_file_path()

    if path.exists():
        data = validate_file_schema(path, TodoTreeConfig.model_json_schema())
        try:
            config = TodoTreeConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"{path}: {e}") from e
        log.debug(f"Loaded config from {path}")
    else:
        config = TodoTreeConfig()

    override: Optional[str] = str(todo_file) if todo_file else os.getenv('TODOTREE_FILE')
    if override:
        config = config.model_copy(update={'todo_file': Path(override)})

    return config.model_copy(update={'todo_file': config.todo_file.expanduser()})
