"""
Command Line Interface for todotree.
"""

import json
import click
from pathlib import Path
from .version import VERSION
from .commands import CommandResult, TodoCommands
from .config import load_config
from .logs import setup_logging
from .data import tree as project_tree
from .models import Priority, TodoResponse
from .recovery import ConfigError


def _format_todo(todo: TodoResponse) -> str:
    check = "x" if todo.finished else " "
    badge = Priority.badge(todo.priority)
    prefix = f"({badge}) " if badge else ""
    return f"{todo.id:>4} [{check}] {prefix}{todo.subject}"


def _echo_todos(todos):
    if not todos:
        click.echo("📭 No todos")
        return
    for todo in todos:
        click.echo(_format_todo(todo))


def _echo_tree(nodes, depth=0):
    for node in nodes:
        count = f" ({node.direct_count})" if node.direct_count else ""
        click.echo(f"{'  ' * depth}📁 {node.name}{count}")
        _echo_tree(node.children, depth + 1)


def _report(result: CommandResult) -> bool:
    if not result.ok:
        click.echo(f"❌ Error: {result.error}")
        return False
    return True


@click.group()
@click.version_option(version=VERSION, prog_name="tdt")
@click.option('-f', '--file', 'todo_file', type=click.Path(dir_okay=False, path_type=Path), help='todo.txt file to use')
@click.option('--config', 'config_file', type=click.Path(dir_okay=False, path_type=Path), help='Config file to read')
@click.option('-v', '--verbose', count=True, help='Log more to stderr (-vv for debug)')
@click.pass_context
def main(ctx, todo_file, config_file, verbose):
    """
    todotree - a todo.txt manager with a hierarchical project view.

    Project tags can be nested with '---', e.g. +home---errands.
    """
    if verbose:
        setup_logging(verbose)
    try:
        config = load_config(todo_file, config_file)
    except ConfigError as e:
        raise click.ClickException(f"Invalid configuration: {e}")
    ctx.obj = TodoCommands(config)


@main.command()
@click.pass_obj
def init(commands):
    """Create an empty todo file if there is none yet."""
    todo_file = commands.config.todo_file
    if todo_file.exists():
        click.echo(f"❌ {todo_file} already exists")
        return
    try:
        todo_file.parent.mkdir(parents=True, exist_ok=True)
        todo_file.touch()
    except OSError as e:
        click.echo(f"❌ Error creating {todo_file}: {e}")
        return
    click.echo(f"📋 Created {todo_file}")


@main.command(name='list')
@click.option('-p', '--project', help='Only show todos at or below this project path (e.g. "home---errands")')
@click.option('--pending', 'state', flag_value='pending', help='Only show open todos')
@click.option('--done', 'state', flag_value='done', help='Only show finished todos')
@click.pass_obj
def list_todos(commands, project, state):
    """List todos in file order."""
    result = commands.get_todos()
    if not _report(result):
        return
    todos = result.todos
    if project:
        todos = [t for t in todos if any(project_tree.matches(p, project) for p in t.projects)]
    if state == 'pending':
        todos = [t for t in todos if not t.finished]
    elif state == 'done':
        todos = [t for t in todos if t.finished]
    _echo_todos(todos)


@main.command()
@click.argument('text', nargs=-1, required=True)
@click.pass_obj
def add(commands, text):
    """Add a todo, e.g. tdt add "(A) Buy milk @shopping +home---errands"."""
    result = commands.add_todo(" ".join(text))
    if _report(result):
        click.echo(f"✅ Added: {_format_todo(result.todos[-1])}")


@main.command()
@click.argument('item_id', type=int)
@click.pass_obj
def done(commands, item_id):
    """Mark a todo as finished."""
    if _report(commands.complete_todo(item_id)):
        click.echo(f"✅ Completed {item_id}")


@main.command()
@click.argument('item_id', type=int)
@click.pass_obj
def undo(commands, item_id):
    """Mark a finished todo as open again."""
    if _report(commands.uncomplete_todo(item_id)):
        click.echo(f"↩️  Reopened {item_id}")


@main.command()
@click.argument('item_id', type=int)
@click.pass_obj
def toggle(commands, item_id):
    """Flip a todo between open and finished."""
    result = commands.toggle_todo(item_id)
    if _report(result):
        todo = next(t for t in result.todos if t.id == item_id)
        click.echo(_format_todo(todo))


@main.command()
@click.argument('item_id', type=int)
@click.pass_obj
def rm(commands, item_id):
    """Delete a todo."""
    if _report(commands.delete_todo(item_id)):
        click.echo(f"🗑️  Removed {item_id}")


@main.command()
@click.pass_obj
def tree(commands):
    """Show the project hierarchy with per-project counts."""
    result = commands.project_tree()
    if not _report(result):
        return
    if not result.tree:
        click.echo("📭 No projects")
        return
    _echo_tree(result.tree)


@main.command()
@click.option('--tree', 'with_tree', is_flag=True, help='Include the project tree')
@click.pass_obj
def export(commands, with_tree):
    """Print the list as JSON."""
    result = commands.project_tree() if with_tree else commands.get_todos()
    if not _report(result):
        return
    data = {'todos': [t.model_dump(mode='json') for t in result.todos]}
    if with_tree:
        data['tree'] = [n.model_dump(mode='json') for n in result.tree]
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


@main.command()
@click.pass_obj
def config(commands):
    """Show the resolved configuration."""
    click.echo(commands.config.to_yaml().rstrip())


if __name__ == "__main__":
    main()
