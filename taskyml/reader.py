"""Locating and reading Taskfiles and Taskvars files from disk."""

from __future__ import annotations

import dataclasses
import os
import sys
from dataclasses import dataclass

import yaml

from .included import smart_join
from .taskfile import Taskfile, merge
from .vars import Vars

DEFAULT_TASKFILES = (
    "Taskfile.yml",
    "Taskfile.yaml",
    "Taskfile.dist.yml",
    "Taskfile.dist.yaml",
)


class TaskfileNotFoundError(FileNotFoundError):
    """Raised when no Taskfile can be found where one was expected."""


class IncludeCycleError(ValueError):
    """Raised when Taskfiles include each other in a loop."""


class IncludedDotenvError(ValueError):
    """Raised when an included Taskfile declares dotenv files."""

    def __init__(self) -> None:
        super().__init__(
            "task: Included Taskfiles can't have dotenv declarations. "
            "Please, move the dotenv declaration to the main Taskfile"
        )


@dataclass
class ReaderNode:
    """One Taskfile in the chain of includes being read."""

    dir: str = ""
    entrypoint: str = ""
    optional: bool = False
    parent: ReaderNode | None = None


def _current_os() -> str:
    platform = sys.platform
    if platform.startswith("win") or platform == "cygwin":
        return "windows"
    if platform.startswith("sunos"):
        return "solaris"
    for name in ("linux", "darwin", "freebsd", "openbsd", "netbsd", "dragonfly", "aix"):
        if platform.startswith(name):
            return name
    return platform


def _parent_dir(path: str) -> str:
    return os.path.dirname(os.path.normpath(path)) or "."


def _base_name(path: str) -> str:
    return os.path.basename(os.path.normpath(path))


def _owner(path: str) -> int:
    return os.stat(path).st_uid


def _try_abs_to_rel(path: str) -> str:
    if not os.path.isabs(path):
        return path
    try:
        return os.path.relpath(path)
    except ValueError:
        return path


def _compose_first(path: str) -> yaml.Node | None:
    with open(path, encoding="utf-8") as stream:
        return next(iter(yaml.compose_all(stream)), None)


def load_taskfile_file(path: str) -> Taskfile:
    """Parse a single Taskfile without following its includes."""
    try:
        node = _compose_first(path)
        if node is None:
            raise ValueError("EOF")
        return Taskfile.from_node(node)
    except (yaml.YAMLError, ValueError) as err:
        raise ValueError(f"task: Failed to parse {_try_abs_to_rel(path)}:\n{err}") from err


def find_taskfile(path: str) -> str:
    """Return path if it is a file, else the first default Taskfile inside it."""
    if os.path.isfile(os.path.realpath(path)) and os.stat(path):
        return path
    os.stat(path)
    for name in DEFAULT_TASKFILES:
        candidate = smart_join(path, name)
        if os.path.exists(candidate):
            return candidate
    raise TaskfileNotFoundError(
        f'task: No Taskfile found in "{path}". Use "task --init" to create a new one'
    )


def find_taskfile_upwards(path: str) -> str:
    """Search path and its parents for a Taskfile, stopping where the owner changes."""
    original = path
    owner = _owner(path)
    while True:
        try:
            return find_taskfile(path)
        except OSError:
            pass
        parent = _parent_dir(path)
        parent_owner = _owner(parent)
        if path == parent or parent_owner != owner:
            raise TaskfileNotFoundError(
                f'task: No Taskfile found in "{original}" (or any of the parent '
                'directories). Use "task --init" to create a new one'
            )
        owner = parent_owner
        path = parent


def check_circular_includes(node: ReaderNode | None) -> None:
    """Raise IncludeCycleError if node's Taskfile already appears among its parents."""
    if node is None:
        raise ValueError("task: failed to check for include cycle: node was nil")
    if node.parent is None:
        raise ValueError("task: failed to check for include cycle: node.Parent was nil")
    base_path = smart_join(node.dir, node.entrypoint)
    current = node
    while current.parent is not None:
        current = current.parent
        current_path = smart_join(current.dir, current.entrypoint)
        if current_path == base_path:
            raise IncludeCycleError(
                f"task: include cycle detected between {current_path} <--> "
                f"{smart_join(node.parent.dir, node.parent.entrypoint)}"
            )


def _apply_advanced_import(included_taskfile: Taskfile, include, directory: str) -> None:
    for variables in (included_taskfile.vars, included_taskfile.env):
        for key, value in variables.items():
            variables.mapping[key] = dataclasses.replace(value, dir=directory)
    for task in included_taskfile.tasks.values():
        task.dir = smart_join(directory, task.dir)
        task.include_vars = include.vars
        task.included_taskfile_vars = included_taskfile.vars
        task.included_taskfile = include


def read_taskfile(reader_node: ReaderNode) -> tuple[Taskfile, str]:
    """Read a Taskfile and everything it includes; return it and its directory."""
    if not reader_node.dir:
        reader_node.dir = os.getcwd()

    path = find_taskfile_upwards(smart_join(reader_node.dir, reader_node.entrypoint))
    reader_node.dir = _parent_dir(path)
    reader_node.entrypoint = _base_name(path)

    taskfile = load_taskfile_file(path)
    version = taskfile.parsed_version()

    if taskfile.includes is not None:
        for key, include in taskfile.includes.items():
            if not include.base_dir:
                taskfile.includes.set(key, dataclasses.replace(include, base_dir=reader_node.dir))

        for namespace, include in taskfile.includes.items():
            _read_include(taskfile, version, reader_node, namespace, include)

    if version < 3.0:
        os_path = smart_join(reader_node.dir, f"Taskfile_{_current_os()}.yml")
        if os.path.exists(os_path):
            merge(taskfile, load_taskfile_file(os_path), None)

    for name, task in taskfile.tasks.items():
        task.task = name

    return taskfile, reader_node.dir


def _read_include(taskfile, version, reader_node, namespace, include) -> None:
    include_path = include.full_taskfile_path()
    try:
        include_path = find_taskfile(include_path)
    except OSError:
        if include.optional:
            return
        raise

    include_node = ReaderNode(
        dir=_parent_dir(include_path),
        entrypoint=_base_name(include_path),
        optional=include.optional,
        parent=reader_node,
    )
    check_circular_includes(include_node)

    try:
        included_taskfile, _ = read_taskfile(include_node)
    except (OSError, ValueError):
        if include.optional:
            return
        raise

    if version >= 3.0 and included_taskfile.dotenv:
        raise IncludedDotenvError()

    if include.advanced_import:
        _apply_advanced_import(included_taskfile, include, include.full_dir_path())

    merge(taskfile, included_taskfile, include, namespace)

    if "default" in included_taskfile.tasks and namespace not in taskfile.tasks:
        default_task = taskfile.tasks[f"{namespace}:default"]
        default_task.aliases.append(namespace)
        default_task.aliases.extend(include.aliases)


def _read_vars_file(path: str) -> Vars:
    node = _compose_first(path)
    if node is None:
        raise ValueError(f"{path}: EOF")
    return Vars.from_node(node)


def read_taskvars(directory: str) -> Vars:
    """Read Taskvars.yml and the OS specific Taskvars file of a directory."""
    variables = Vars()
    path = smart_join(directory, "Taskvars.yml")
    if os.path.exists(path):
        variables = _read_vars_file(path)
    os_path = smart_join(directory, f"Taskvars_{_current_os()}.yml")
    if os.path.exists(os_path):
        variables.merge(_read_vars_file(os_path))
    return variables