"""A single task of a Taskfile."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, TypeVar

import yaml

from .cmd import Cmd, Dep
from .platforms import Platform
from .precondition import Precondition
from .vars import (
    Vars,
    _decode_bool,
    _decode_str,
    _decode_str_list,
    _fields,
    _is_null,
    _optional_vars,
    _unmarshal_error,
)

if TYPE_CHECKING:
    from .included import IncludedTaskfile

_T = TypeVar("_T")

_TASK_KEYS = {
    "cmds", "deps", "label", "desc", "summary", "aliases", "sources",
    "generates", "status", "preconditions", "dir", "set", "shopt", "vars",
    "env", "dotenv", "silent", "interactive", "internal", "method", "prefix",
    "ignore_error", "run", "platforms",
}


def _decode_list(
    node: yaml.Node, decode: Callable[[yaml.Node], _T], target: str
) -> list[_T]:
    """Decode a sequence node, leaving out null items."""
    if _is_null(node):
        return []
    if isinstance(node, yaml.SequenceNode):
        return [decode(item) for item in node.value if not _is_null(item)]
    raise _unmarshal_error(node, target)


@dataclass
class Task:
    """A task: its commands, dependencies and settings."""

    task: str = ""
    cmds: list[Cmd] = field(default_factory=list)
    deps: list[Dep] = field(default_factory=list)
    label: str = ""
    desc: str = ""
    summary: str = ""
    aliases: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    generates: list[str] = field(default_factory=list)
    status: list[str] = field(default_factory=list)
    preconditions: list[Precondition] = field(default_factory=list)
    dir: str = ""
    set: list[str] = field(default_factory=list)
    shopt: list[str] = field(default_factory=list)
    vars: Vars | None = None
    env: Vars | None = None
    dotenv: list[str] = field(default_factory=list)
    silent: bool = False
    interactive: bool = False
    internal: bool = False
    method: str = ""
    prefix: str = ""
    ignore_error: bool = False
    run: str = ""
    include_vars: Vars | None = None
    included_taskfile_vars: Vars | None = None
    included_taskfile: IncludedTaskfile | None = None
    platforms: list[Platform] = field(default_factory=list)

    def name(self) -> str:
        """The label if one is set, otherwise the task name."""
        return self.label or self.task

    @classmethod
    def from_node(cls, node: yaml.Node) -> Task:
        if isinstance(node, yaml.ScalarNode):
            return cls(cmds=[Cmd.from_node(node)])
        if isinstance(node, yaml.SequenceNode):
            return cls(cmds=_decode_list(node, Cmd.from_node, "[]*taskfile.Cmd"))
        if isinstance(node, yaml.MappingNode):
            return cls._from_mapping(node)
        raise _unmarshal_error(node, "task")

    @classmethod
    def _from_mapping(cls, node: yaml.Node) -> Task:
        fields = _fields(node, _TASK_KEYS)

        def text(key: str) -> str:
            return _decode_str(fields[key]) if key in fields else ""

        def flag(key: str) -> bool:
            return _decode_bool(fields[key]) if key in fields else False

        def strings(key: str) -> list[str]:
            return (_decode_str_list(fields[key]) or []) if key in fields else []

        def items(key: str, decode: Callable[[yaml.Node], _T], target: str) -> list[_T]:
            return _decode_list(fields[key], decode, target) if key in fields else []

        return cls(
            cmds=items("cmds", Cmd.from_node, "[]*taskfile.Cmd"),
            deps=items("deps", Dep.from_node, "[]*taskfile.Dep"),
            label=text("label"),
            desc=text("desc"),
            summary=text("summary"),
            aliases=strings("aliases"),
            sources=strings("sources"),
            generates=strings("generates"),
            status=strings("status"),
            preconditions=items(
                "preconditions", Precondition.from_node, "[]*taskfile.Precondition"
            ),
            dir=text("dir"),
            set=strings("set"),
            shopt=strings("shopt"),
            vars=_optional_vars(fields, "vars"),
            env=_optional_vars(fields, "env"),
            dotenv=strings("dotenv"),
            silent=flag("silent"),
            interactive=flag("interactive"),
            internal=flag("internal"),
            method=text("method"),
            prefix=text("prefix"),
            ignore_error=flag("ignore_error"),
            run=text("run"),
            platforms=items("platforms", Platform.from_node, "[]*taskfile.Platform"),
        )

    def deep_copy(self) -> Task:
        """Return a copy that shares no mutable data with this task."""
        return copy.deepcopy(self)