"""
Data submodule: the todo list model, its file I/O and the project tree builder.
"""

from .core import TodoList
from .tree import build, build_project_tree

__all__ = [
    'TodoList',
    'build',
    'build_project_tree'
]
