"""
todotree - a todo.txt task list with a hierarchical project view.

Project tags may encode a path with the ``---`` separator, e.g.
``+home---errands``; the project tree groups them into nested nodes.
"""

from .version import VERSION
from .models import (
    PROJECT_SEPARATOR,
    Priority,
    TodoItem,
    TodoResponse,
    ProjectPath,
    ProjectNode,
)
from .recovery import (
    ErrorKind,
    TodoTreeError,
    TodoIOError,
    NotBoundError,
    NotFoundError,
    ConfigError,
)
from .data import TodoList, build, build_project_tree

__version__ = VERSION

__all__ = [
    "VERSION",
    "PROJECT_SEPARATOR",
    "Priority",
    "TodoItem",
    "TodoResponse",
    "ProjectPath",
    "ProjectNode",
    "ErrorKind",
    "TodoTreeError",
    "TodoIOError",
    "NotBoundError",
    "NotFoundError",
    "ConfigError",
    "TodoList",
    "build",
    "build_project_tree",
]
