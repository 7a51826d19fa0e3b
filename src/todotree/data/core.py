"""
TodoList - the ordered, id-indexed collection of todo.txt items.

Ids are handed out from a counter owned by each list instance, starting at 1,
and are never reused. Persistence always rewrites the whole file.
"""
from pathlib import Path
from typing import Iterator, List, Optional, Union
from todotree.recovery import NotBoundError, NotFoundError
from todotree.models import TodoItem
from todotree.logs import get_logger
from .io import read_text, write_text

log = get_logger("data")

class TodoList:
    """An ordered list of TodoItem records, optionally bound to a file."""

    def __init__(self, path: Union[Path, str, None] = None, atomic: bool = True, stamp_completion: bool = True):
        self._items: List[TodoItem] = []
        self._path: Optional[Path] = Path(path) if path is not None else None
        self._next_id: int = 1
        self.atomic = atomic
        self.stamp_completion = stamp_completion

    @classmethod
    def loads(cls, text: str, path: Union[Path, str, None] = None, **kwargs) -> 'TodoList':
        """Build a list from LF-separated todo.txt text; blank lines are skipped."""
        todo_list = cls(path, **kwargs)
        for line in text.split("\n"):
            line = line.strip()
            if not line:
                continue
            todo_list._append(line)
        return todo_list

    @classmethod
    def load(cls, path: Union[Path, str], **kwargs) -> 'TodoList':
        """Read ``path`` and bind the new list to it."""
        todo_list = cls.loads(read_text(path), path, **kwargs)
        log.info(f"Loaded {len(todo_list)} items from {path}")
        return todo_list

    from_file = load

    def _append(self, line: str) -> TodoItem:
        item = TodoItem.parse(line, self._next_id)
        self._next_id += 1
        self._items.append(item)
        return item

    @property
    def path(self) -> Optional[Path]:
        return self._path

    def set_path(self, path: Union[Path, str]):
        self._path = Path(path)

    @property
    def next_id(self) -> int:
        return self._next_id

    @property
    def items(self) -> List[TodoItem]:
        """A copy of the records in file order."""
        return list(self._items)

    def dumps(self) -> str:
        return "\n".join(item.render() for item in self._items)

    def save(self):
        """Overwrite the bound file with the full rendered list."""
        if self._path is None:
            raise NotBoundError()
        self.save_to(self._path)

    def save_to(self, path: Union[Path, str]):
        """Write the full list to ``path`` without changing the binding."""
        write_text(path, self.dumps(), atomic=self.atomic)
        log.info(f"Saved {len(self)} items to {path}")

    def add(self, subject: str) -> int:
        """Append a new item parsed from ``subject`` and return its id.

        Line breaks inside ``subject`` are folded to spaces so the item stays
        a single line on disk.
        """
        item = self._append(subject)
        log.debug(f"Added item {item.id}: {item.render()}")
        return item.id

    def remove(self, item_id: int) -> TodoItem:
        for pos, item in enumerate(self._items):
            if item.id == item_id:
                log.debug(f"Removed item {item_id}")
                return self._items.pop(pos)
        raise NotFoundError(item_id)

    def get(self, item_id: int) -> Optional[TodoItem]:
        """Find an item by id, or None."""
        return next((item for item in self._items if item.id == item_id), None)

    # Records are mutable models, so get() already hands out the live record
    get_mut = get

    def _require(self, item_id: int) -> TodoItem:
        item = self.get(item_id)
        if item is None:
            raise NotFoundError(item_id)
        return item

    def complete(self, item_id: int) -> bool:
        self._require(item_id).complete(stamp=self.stamp_completion)
        return True

    def uncomplete(self, item_id: int) -> bool:
        self._require(item_id).uncomplete()
        return True

    def toggle(self, item_id: int) -> bool:
        """Flip completion state and return the new ``finished`` value."""
        item = self._require(item_id)
        if item.finished:
            item.uncomplete()
        else:
            item.complete(stamp=self.stamp_completion)
        return item.finished

    def pending(self) -> Iterator[TodoItem]:
        return (item for item in self._items if not item.finished)

    def done(self) -> Iterator[TodoItem]:
        return (item for item in self._items if item.finished)

    def projects(self) -> List[str]:
        """Every project tag in the list, duplicates kept, in list order."""
        return [project for item in self._items for project in item.projects]

    def contexts(self) -> List[str]:
        return [context for item in self._items for context in item.contexts]

    def __iter__(self) -> Iterator[TodoItem]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return not self._items
