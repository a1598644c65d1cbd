"""Task commands and dependencies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import yaml

from .platforms import Platform
from .vars import (
    Vars,
    _decode_bool,
    _decode_str,
    _decode_str_list,
    _fields,
    _is_null,
    _line,
    _optional_vars,
    _short_tag,
    _unmarshal_error,
)


def _decode_platforms(node: yaml.Node) -> list[Platform] | None:
    if _is_null(node):
        return None
    if isinstance(node, yaml.SequenceNode):
        return [Platform.from_node(item) for item in node.value if not _is_null(item)]
    raise _unmarshal_error(node, "[]*Platform")


def _decode_call(node: yaml.Node) -> tuple[str, Vars | None]:
    fields = _fields(node, {"task", "vars"})
    task = _decode_str(fields["task"]) if "task" in fields else ""
    return task, _optional_vars(fields, "vars")


@dataclass
class Cmd:
    """A shell command or a call of another task."""

    cmd: str = ""
    silent: bool = False
    task: str = ""
    set: list[str] | None = None
    shopt: list[str] | None = None
    vars: Vars | None = None
    ignore_error: bool = False
    defer: bool = False
    platforms: list[Platform] | None = None

    @classmethod
    def from_node(cls, node: yaml.Node) -> Cmd:
        if isinstance(node, yaml.ScalarNode):
            return cls(cmd=_decode_str(node))
        if isinstance(node, yaml.MappingNode):
            attempts: tuple[Callable[[yaml.Node], Cmd | None], ...] = (
                cls._as_command,
                cls._as_deferred_command,
                cls._as_deferred_call,
                cls._as_task_call,
            )
            for attempt in attempts:
                try:
                    result = attempt(node)
                except ValueError:
                    continue
                if result is not None:
                    return result
            raise ValueError(f"yaml: line {_line(node)}: invalid keys in command")
        raise _unmarshal_error(node, "command")

    @classmethod
    def _as_command(cls, node: yaml.Node) -> Cmd | None:
        fields = _fields(node, {"cmd", "silent", "set", "shopt", "ignore_error", "platforms"})
        command = cls(
            cmd=_decode_str(fields["cmd"]) if "cmd" in fields else "",
            silent=_decode_bool(fields["silent"]) if "silent" in fields else False,
            set=_decode_str_list(fields["set"]) if "set" in fields else None,
            shopt=_decode_str_list(fields["shopt"]) if "shopt" in fields else None,
            ignore_error=(
                _decode_bool(fields["ignore_error"]) if "ignore_error" in fields else False
            ),
            platforms=_decode_platforms(fields["platforms"]) if "platforms" in fields else None,
        )
        return command if command.cmd else None

    @classmethod
    def _as_deferred_command(cls, node: yaml.Node) -> Cmd | None:
        fields = _fields(node, {"defer"})
        command = _decode_str(fields["defer"]) if "defer" in fields else ""
        return cls(cmd=command, defer=True) if command else None

    @classmethod
    def _as_deferred_call(cls, node: yaml.Node) -> Cmd | None:
        defer_node = _fields(node, {"defer"}).get("defer")
        if defer_node is None or _is_null(defer_node):
            return None
        task, variables = _decode_call(defer_node)
        return cls(task=task, vars=variables, defer=True) if task else None

    @classmethod
    def _as_task_call(cls, node: yaml.Node) -> Cmd | None:
        task, variables = _decode_call(node)
        return cls(task=task, vars=variables) if task else None


@dataclass
class Dep:
    """A task that must run before another."""

    task: str = ""
    vars: Vars | None = None

    @classmethod
    def from_node(cls, node: yaml.Node) -> Dep:
        if isinstance(node, yaml.ScalarNode):
            return cls(task=_decode_str(node))
        if isinstance(node, yaml.MappingNode):
            task, variables = _decode_call(node)
            return cls(task=task, vars=variables)
        raise ValueError(f"cannot unmarshal {_short_tag(node)} into dependency")