"""The Taskfile document and merging of included Taskfiles."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import timedelta

import yaml

from .included import IncludedTaskfile, IncludedTaskfiles
from .output import Output
from .task import Task
from .vars import (
    _TAG_PREFIX,
    Vars,
    _decode_bool,
    _decode_str,
    _decode_str_list,
    _fields,
    _is_null,
    _line,
    _short_tag,
    _unmarshal_error,
)

NAMESPACE_SEPARATOR = ":"

_TASKFILE_KEYS = {
    "version", "expansions", "output", "method", "includes", "set", "shopt",
    "vars", "env", "tasks", "silent", "dotenv", "run", "interval",
}

_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_FLOAT_TEXT = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)", re.IGNORECASE
)


class TaskfileVersionError(ValueError):
    """Raised when a Taskfile version is unreadable or versions do not match."""


def _parse_duration(text: str) -> timedelta:
    rest = text
    sign = 1
    if rest[:1] in ("+", "-"):
        sign = -1 if rest[0] == "-" else 1
        rest = rest[1:]
    if rest == "0":
        return timedelta(0)
    total = 0.0
    position = 0
    while position < len(rest):
        match = _DURATION_PART.match(rest, position)
        if match is None:
            raise ValueError(f'time: invalid duration "{text}"')
        total += float(match.group(1)) * _UNIT_NANOSECONDS[match.group(2)]
        position = match.end()
    if not rest:
        raise ValueError(f'time: invalid duration "{text}"')
    return timedelta(microseconds=sign * total / 1_000)


def _decode_duration(node: yaml.Node) -> timedelta:
    if _is_null(node):
        return timedelta(0)
    if isinstance(node, yaml.ScalarNode):
        if node.tag == _TAG_PREFIX + "int":
            return timedelta(microseconds=int(node.value, 0) / 1_000)
        return _parse_duration(node.value)
    raise _unmarshal_error(node, "time.Duration")


def _decode_int(node: yaml.Node) -> int:
    if _is_null(node):
        return 0
    if isinstance(node, yaml.ScalarNode):
        try:
            return int(node.value, 0)
        except ValueError:
            raise ValueError(
                f"yaml: line {_line(node)}: cannot unmarshal {_short_tag(node)} "
                f"`{node.value}` into int"
            ) from None
    raise _unmarshal_error(node, "int")


def _decode_tasks(node: yaml.Node) -> dict[str, Task]:
    if _is_null(node):
        return {}
    if not isinstance(node, yaml.MappingNode):
        raise _unmarshal_error(node, "taskfile.Tasks")
    tasks: dict[str, Task] = {}
    for key_node, value_node in node.value:
        key = key_node.value if isinstance(key_node, yaml.ScalarNode) else ""
        tasks[key] = Task() if _is_null(value_node) else Task.from_node(value_node)
    return tasks


@dataclass
class Taskfile:
    """A whole Taskfile document."""

    version: str = ""
    expansions: int = 0
    output: Output = field(default_factory=Output)
    method: str = ""
    includes: IncludedTaskfiles | None = None
    set: list[str] = field(default_factory=list)
    shopt: list[str] = field(default_factory=list)
    vars: Vars = field(default_factory=Vars)
    env: Vars = field(default_factory=Vars)
    tasks: dict[str, Task] = field(default_factory=dict)
    silent: bool = False
    dotenv: list[str] = field(default_factory=list)
    run: str = ""
    interval: timedelta = field(default_factory=timedelta)

    @classmethod
    def from_node(cls, node: yaml.Node) -> Taskfile:
        if not isinstance(node, yaml.MappingNode):
            raise _unmarshal_error(node, "taskfile")
        fields = _fields(node, _TASKFILE_KEYS)

        def text(key: str) -> str:
            return _decode_str(fields[key]) if key in fields else ""

        def strings(key: str) -> list[str]:
            return (_decode_str_list(fields[key]) or []) if key in fields else []

        def variables(key: str) -> Vars:
            value = fields.get(key)
            if value is None or _is_null(value):
                return Vars()
            return Vars.from_node(value)

        includes_node = fields.get("includes")
        expansions = _decode_int(fields["expansions"]) if "expansions" in fields else 0
        output_node = fields.get("output")
        return cls(
            version=text("version"),
            expansions=expansions if expansions > 0 else 2,
            output=(
                Output.from_node(output_node)
                if output_node is not None and not _is_null(output_node)
                else Output()
            ),
            method=text("method"),
            includes=(
                IncludedTaskfiles.from_node(includes_node)
                if includes_node is not None and not _is_null(includes_node)
                else None
            ),
            set=strings("set"),
            shopt=strings("shopt"),
            vars=variables("vars"),
            env=variables("env"),
            tasks=_decode_tasks(fields["tasks"]) if "tasks" in fields else {},
            silent=_decode_bool(fields["silent"]) if "silent" in fields else False,
            dotenv=strings("dotenv"),
            run=text("run"),
            interval=(
                _decode_duration(fields["interval"]) if "interval" in fields else timedelta(0)
            ),
        )

    def parsed_version(self) -> float:
        """The version as a number."""
        if _FLOAT_TEXT.fullmatch(self.version) is None:
            raise TaskfileVersionError(
                f'task: Could not parse taskfile version "{self.version}": '
                f'strconv.ParseFloat: parsing "{self.version}": invalid syntax'
            )
        return float(self.version)


def task_name_with_namespace(task_name: str, *namespaces: str) -> str:
    """Prefix a task name with namespaces, unless it starts with the separator."""
    if task_name.startswith(NAMESPACE_SEPARATOR):
        return task_name[len(NAMESPACE_SEPARATOR):]
    return NAMESPACE_SEPARATOR.join([*namespaces, task_name])


def merge(
    t1: Taskfile,
    t2: Taskfile,
    included_taskfile: IncludedTaskfile | None,
    *namespaces: str,
) -> None:
    """Merge t2 into t1, placing t2's tasks under the given namespaces."""
    if t1.version != t2.version:
        raise TaskfileVersionError(
            "task: Taskfiles versions should match. "
            f'First is "{t1.version}" but second is "{t2.version}"'
        )

    if t2.expansions not in (0, 2):
        t1.expansions = t2.expansions
    if t2.output.is_set():
        t1.output = t2.output

    if t1.includes is None:
        t1.includes = IncludedTaskfiles()
    t1.includes.merge(t2.includes)

    t1.vars.merge(t2.vars)
    t1.env.merge(t2.env)

    for name, original in t2.tasks.items():
        task = original.deep_copy()
        task.internal = task.internal or (
            included_taskfile is not None and included_taskfile.internal
        )

        for dep in task.deps:
            dep.task = task_name_with_namespace(dep.task, *namespaces)
        for cmd in task.cmds:
            if cmd.task:
                cmd.task = task_name_with_namespace(cmd.task, *namespaces)
        task.aliases = [task_name_with_namespace(alias, *namespaces) for alias in task.aliases]

        if included_taskfile is not None:
            for namespace_alias in included_taskfile.aliases:
                task.aliases.append(task_name_with_namespace(task.task, namespace_alias))
                task.aliases.extend(
                    task_name_with_namespace(alias, namespace_alias)
                    for alias in original.aliases
                )

        t1.tasks[task_name_with_namespace(name, *namespaces)] = task