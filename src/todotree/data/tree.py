"""
Project tree builder.

Folds a multiset of project tags into a forest of ProjectNode objects. A tag
such as ``home---errands`` becomes the node ``errands`` under ``home``; only the
last segment of each tag is counted.
"""
from typing import Dict, Iterable, Iterator, List, Optional
from todotree.models import PROJECT_SEPARATOR, ProjectNode, ProjectPath, TodoItem

SEPARATOR = PROJECT_SEPARATOR

class _TempNode:
    __slots__ = ("count", "children")

    def __init__(self):
        self.count = 0
        self.children: Dict[str, '_TempNode'] = {}

def _convert(level: Dict[str, _TempNode], prefix: tuple) -> List[ProjectNode]:
    nodes = []
    for name in sorted(level):
        temp = level[name]
        segments = prefix + (name,)
        nodes.append(ProjectNode(
            name=name,
            full_path=str(ProjectPath.from_segments(segments)),
            direct_count=temp.count,
            children=_convert(temp.children, segments),
        ))
    return nodes

def build(tags: Iterable[str]) -> List[ProjectNode]:
    """Build the project forest from project tag strings.

    Empty tags, and tags made only of separators, contribute nothing.
    Empty segments inside a tag are dropped before folding.
    """
    root: Dict[str, _TempNode] = {}
    for tag in tags:
        path = ProjectPath(tag)
        if path.is_empty:
            continue
        level = root
        node = None
        for segment in path.segments:
            node = level.setdefault(segment, _TempNode())
            level = node.children
        node.count += 1
    return _convert(root, ())

def build_project_tree(items: Iterable[TodoItem]) -> List[ProjectNode]:
    """Build the forest from every project tag carried by ``items``."""
    return build(project for item in items for project in item.projects)

def walk(forest: List[ProjectNode]) -> Iterator[ProjectNode]:
    for node in forest:
        yield from node.walk()

def total_count(forest: List[ProjectNode]) -> int:
    return sum(node.direct_count for node in walk(forest))

def find(forest: List[ProjectNode], full_path: str) -> Optional[ProjectNode]:
    """Find the node at ``full_path``, or None."""
    nodes = forest
    found = None
    for segment in ProjectPath(full_path).segments:
        found = next((n for n in nodes if n.name == segment), None)
        if found is None:
            return None
        nodes = found.children
    return found

def matches(project_tag: str, full_path: str) -> bool:
    """True when ``project_tag`` sits at or below the node ``full_path``."""
    return ProjectPath(project_tag).is_within(ProjectPath(full_path))

def filter_items(items: Iterable[TodoItem], full_path: str) -> List[TodoItem]:
    """Items carrying at least one project tag at or below ``full_path``."""
    return [item for item in items if any(matches(p, full_path) for p in item.projects)]
