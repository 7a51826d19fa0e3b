"""
Command boundary for front-ends.

Each command loads the configured todo file, applies one change, saves, and
returns the full post-change snapshot. Failures come back as a message string
in ``CommandResult.error`` rather than as exceptions.
"""
from typing import Callable, List, Optional
from pydantic import BaseModel, Field
from todotree.config import TodoTreeConfig, load_config
from todotree.data import TodoList, build_project_tree
from todotree.models import ProjectNode, TodoResponse
from todotree.recovery import TodoTreeError
from todotree.logs import get_logger

log = get_logger("commands")

class CommandResult(BaseModel):
    """Outcome of a command: a snapshot on success, a message on failure."""

    todos: List[TodoResponse] = Field(default_factory=list)
    tree: List[ProjectNode] = Field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

def snapshot(todo_list: TodoList) -> List[TodoResponse]:
    return [item.to_response() for item in todo_list]

class TodoCommands:
    """Callable operations over the configured todo file."""

    def __init__(self, config: Optional[TodoTreeConfig] = None):
        self.config = config or load_config()

    def open_list(self) -> TodoList:
        return TodoList.load(
            self.config.todo_file,
            atomic=self.config.atomic_save,
            stamp_completion=self.config.stamp_completion,
        )

    def _run(self, name: str, mutate: Optional[Callable[[TodoList], object]] = None) -> CommandResult:
        try:
            todo_list = self.open_list()
            if mutate is not None:
                mutate(todo_list)
                todo_list.save()
        except TodoTreeError as e:
            log.warning(f"{name} failed ({e.kind.value}): {e}")
            return CommandResult(error=str(e))
        return CommandResult(todos=snapshot(todo_list))

    def get_todos(self) -> CommandResult:
        return self._run("get_todos")

    def add_todo(self, subject: str) -> CommandResult:
        return self._run("add_todo", lambda todos: todos.add(subject))

    def toggle_todo(self, item_id: int) -> CommandResult:
        return self._run("toggle_todo", lambda todos: todos.toggle(item_id))

    def complete_todo(self, item_id: int) -> CommandResult:
        return self._run("complete_todo", lambda todos: todos.complete(item_id))

    def uncomplete_todo(self, item_id: int) -> CommandResult:
        return self._run("uncomplete_todo", lambda todos: todos.uncomplete(item_id))

    def delete_todo(self, item_id: int) -> CommandResult:
        return self._run("delete_todo", lambda todos: todos.remove(item_id))

    def project_tree(self) -> CommandResult:
        """The project forest for the current file, alongside the snapshot."""
        try:
            todo_list = self.open_list()
        except TodoTreeError as e:
            log.warning(f"project_tree failed ({e.kind.value}): {e}")
            return CommandResult(error=str(e))
        return CommandResult(todos=snapshot(todo_list), tree=build_project_tree(todo_list))
