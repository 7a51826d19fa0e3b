from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from datetime import date
from typing import Optional, List, Dict, Union, Iterator
import re
import yaml

PROJECT_SEPARATOR = "---"

CONTEXT_MARKER = "@"
PROJECT_MARKER = "+"

COMPLETE_RE = re.compile(r'^x\s+')
PRIORITY_RE = re.compile(r'^\(([A-Z])\)\s+')
DATE_RE = re.compile(r'^(\d{4}-\d{2}-\d{2})(?:\s+|$)')
TRAILING_PRI_RE = re.compile(r'(?:^|\s+)pri:([A-Z])$')
PRI_TAIL_RE = re.compile(r'(?:^|\s)pri:[A-Z]\\*$')
ESCAPED_PRI_RE = re.compile(r'((?:^|\s)pri:[A-Z]\\*)\\$')
KEY_VALUE_RE = re.compile(r'^([A-Za-z0-9_-]+):([^\s:/][^\s:]*)$')
LINE_BREAK_RE = re.compile(r'\s*[\r\n]+\s*')

# A subject that would be read back as a structural field is written with a
# leading backslash, e.g. "\x ray film" or "\(B) call dad".
ESCAPE = "\\"


class BaseYAMLModel(BaseModel):
    """Pydantic model that can be read from and written to YAML."""

    @classmethod
    def from_yaml(cls, text: str):
        data = yaml.safe_load(text) or {}
        return cls.model_validate(data)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.model_dump(mode='json'), default_flow_style=False, sort_keys=False, allow_unicode=True)


class Priority:
    """Helpers for todo.txt priorities, stored as a single letter A-Z."""

    LETTERS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
    BADGES = "ABC"

    @classmethod
    def normalize(cls, value: Union[str, int, None]) -> Optional[str]:
        """Accept a letter, an ordinal rank (A = 0) or None."""
        if value is None:
            return None
        if isinstance(value, bool):
            raise ValueError(f"Invalid priority: {value!r}")
        if isinstance(value, int):
            if not 0 <= value < len(cls.LETTERS):
                raise ValueError(f"Priority rank out of range: {value}")
            return cls.LETTERS[value]
        if isinstance(value, str) and len(value) == 1 and value in cls.LETTERS:
            return value
        raise ValueError(f"Invalid priority: {value!r}")

    @classmethod
    def rank(cls, letter: Optional[str]) -> Optional[int]:
        if letter is None:
            return None
        return cls.LETTERS.index(letter)

    @classmethod
    def badge(cls, letter: Optional[str]) -> Optional[str]:
        """Only the three highest priorities get a badge."""
        if letter is not None and letter in cls.BADGES:
            return letter
        return None


def _parse_date(text: str) -> Optional[date]:
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def _take_date(rest: str):
    """Split a leading YYYY-MM-DD off ``rest`` if it is a real date."""
    match = DATE_RE.match(rest)
    if match:
        parsed = _parse_date(match.group(1))
        if parsed is not None:
            return parsed, rest[match.end():]
    return None, rest


def _looks_structural(text: str) -> bool:
    """True when ``text`` starts with something parse would not keep as subject."""
    if text.startswith(ESCAPE) or COMPLETE_RE.match(text) or PRIORITY_RE.match(text):
        return True
    parsed, _ = _take_date(text)
    return parsed is not None


def _unescape(rest: str) -> str:
    if rest.startswith(ESCAPE) and _looks_structural(rest[len(ESCAPE):]):
        return rest[len(ESCAPE):]
    return rest


def _tagged(words: List[str], marker: str) -> List[str]:
    return [word[len(marker):] for word in words if word.startswith(marker) and len(word) > len(marker)]


class TodoItem(BaseModel):
    """One line of a todo.txt file.

    Only the structural prefix (completion, dates, priority) is split off the
    line; inline tags stay in ``subject`` and ``contexts``, ``projects`` and
    ``tags`` are computed from it on every access.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: int = Field(default=0, ge=0, description="Id assigned by the owning list, 0 when unowned")
    subject: str = Field(default="", description="Free text after the structural prefix, inline tags included")
    finished: bool = Field(default=False, description="Completion flag")
    priority: Optional[str] = Field(default=None, description="Priority letter A-Z, None when unset")
    create_date: Optional[date] = Field(default=None, description="When the task was created")
    finish_date: Optional[date] = Field(default=None, description="When the task was completed")

    @field_validator('priority', mode='before')
    @classmethod
    def validate_priority(cls, v):
        return Priority.normalize(v)

    @field_validator('subject')
    @classmethod
    def validate_subject(cls, v):
        # One record is one line
        return LINE_BREAK_RE.sub(' ', v).strip()

    @classmethod
    def parse(cls, line: str, item_id: int = 0) -> 'TodoItem':
        """Parse a single line. Never raises; unrecognized prefixes stay in the subject."""
        rest = line.strip()
        finished = False
        priority = None
        create_date = None
        finish_date = None

        match = COMPLETE_RE.match(rest)
        if match:
            finished = True
            rest = rest[match.end():]
            finish_date, rest = _take_date(rest)
            if finish_date is not None:
                create_date, rest = _take_date(rest)
            # Completed tasks keep their priority as a trailing pri: tag
            match = TRAILING_PRI_RE.search(rest)
            while match:
                if priority is None:
                    priority = match.group(1)
                rest = rest[:match.start()]
                match = TRAILING_PRI_RE.search(rest)
            rest = ESCAPED_PRI_RE.sub(r'\1', rest)
        else:
            match = PRIORITY_RE.match(rest)
            if match:
                priority = match.group(1)
                rest = rest[match.end():]
            create_date, rest = _take_date(rest)

        return cls(
            id=item_id,
            subject=_unescape(rest),
            finished=finished,
            priority=priority,
            create_date=create_date,
            finish_date=finish_date,
        )

    def _compose(self, subject: str) -> str:
        parts = []
        if self.finished:
            parts.append("x")
            if self.finish_date:
                parts.append(self.finish_date.isoformat())
                # Without a completion date the first date would be read as one
                if self.create_date:
                    parts.append(self.create_date.isoformat())
        else:
            if self.priority:
                parts.append(f"({self.priority})")
            if self.create_date:
                parts.append(self.create_date.isoformat())
        if self.finished and PRI_TAIL_RE.search(subject):
            subject += ESCAPE
        if subject:
            parts.append(subject)
        if self.finished and self.priority:
            parts.append(f"pri:{self.priority}")
        return " ".join(parts)

    def _reads_back_as_self(self, line: str) -> bool:
        parsed = TodoItem.parse(line)
        return (
            parsed.subject == self.subject
            and parsed.finished == self.finished
            and parsed.priority == self.priority
            and parsed.finish_date == self.finish_date
        )

    def render(self) -> str:
        """Render back to a single todo.txt line in canonical field order.

        A subject that would be mistaken for a completion marker, priority or
        date in its position is escaped so the line parses back to the same
        record.
        """
        line = self._compose(self.subject)
        if self.subject and not self._reads_back_as_self(line):
            line = self._compose(ESCAPE + self.subject)
        return line

    def __str__(self) -> str:
        return self.render()

    @computed_field
    @property
    def contexts(self) -> List[str]:
        return _tagged(self.subject.split(), CONTEXT_MARKER)

    @computed_field
    @property
    def projects(self) -> List[str]:
        return _tagged(self.subject.split(), PROJECT_MARKER)

    @computed_field
    @property
    def tags(self) -> Dict[str, str]:
        found = {}
        for word in self.subject.split():
            match = KEY_VALUE_RE.match(word)
            if match:
                found[match.group(1)] = match.group(2)
        return found

    def complete(self, stamp: bool = True, today: Optional[date] = None):
        """Mark finished. A no-op on an already finished item.

        Items with a creation date are always stamped: todo.txt requires a
        completion date before the creation date.
        """
        if self.finished:
            return
        self.finished = True
        if (stamp or self.create_date is not None) and self.finish_date is None:
            self.finish_date = today or date.today()

    def uncomplete(self):
        """Mark pending again. A no-op on a pending item."""
        if not self.finished:
            return
        self.finished = False
        self.finish_date = None

    def set_subject(self, subject: str):
        self.subject = subject

    def set_priority(self, priority: Union[str, int, None]):
        self.priority = priority

    def to_response(self) -> 'TodoResponse':
        return TodoResponse(
            id=self.id,
            subject=self.subject,
            finished=self.finished,
            priority=self.priority,
            contexts=self.contexts,
            projects=self.projects,
        )


class TodoResponse(BaseModel):
    """Snapshot of one item as handed across the command boundary."""

    id: int
    subject: str
    finished: bool
    priority: Optional[str] = None
    contexts: List[str] = Field(default_factory=list)
    projects: List[str] = Field(default_factory=list)


class ProjectPath:
    """A project tag read as a hierarchy path.

    Segments are separated by ``PROJECT_SEPARATOR``. Empty segments from
    leading, trailing or doubled separators are dropped.
    """

    def __init__(self, tag: str):
        self.raw_tag = tag
        self.segments = tuple(part for part in tag.split(PROJECT_SEPARATOR) if part)

    @classmethod
    def from_segments(cls, segments) -> 'ProjectPath':
        return cls(PROJECT_SEPARATOR.join(segments))

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def name(self) -> Optional[str]:
        return self.segments[-1] if self.segments else None

    @property
    def parent(self) -> Optional['ProjectPath']:
        if len(self.segments) < 2:
            return None
        return ProjectPath.from_segments(self.segments[:-1])

    def is_within(self, other: 'ProjectPath') -> bool:
        """True when this path equals ``other`` or lies below it."""
        if other.is_empty:
            return False
        return self.segments[:len(other.segments)] == other.segments

    def __len__(self) -> int:
        return len(self.segments)

    def __eq__(self, other) -> bool:
        if not isinstance(other, ProjectPath):
            return NotImplemented
        return self.segments == other.segments

    def __hash__(self) -> int:
        return hash(self.segments)

    def __str__(self) -> str:
        return PROJECT_SEPARATOR.join(self.segments)

    def __repr__(self) -> str:
        return f"ProjectPath({str(self)!r})"


class ProjectNode(BaseModel):
    """One level of the project hierarchy."""

    name: str = Field(description="A single path segment")
    full_path: str = Field(description="The segment joined with its ancestors")
    direct_count: int = Field(default=0, ge=0, description="Tags whose full path is exactly this node")
    children: List['ProjectNode'] = Field(default_factory=list, description="Child nodes sorted by name")

    @property
    def path(self) -> ProjectPath:
        return ProjectPath(self.full_path)

    def find_child(self, name: str) -> Optional['ProjectNode']:
        """Find a direct child by segment name."""
        return next((c for c in self.children if c.name == name), None)

    def walk(self) -> Iterator['ProjectNode']:
        """Yield this node and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def total_count(self) -> int:
        """Direct count of this node plus all descendants."""
        return sum(node.direct_count for node in self.walk())

ProjectNode.model_rebuild()
