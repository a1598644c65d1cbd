"""Taskfiles included by another Taskfile, and path helpers."""

from __future__ import annotations

import copy
import os
from dataclasses import dataclass, field
from typing import Iterator

import yaml

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


def smart_join(base: str, path: str) -> str:
    """Join path onto base unless path is already absolute."""
    if os.path.isabs(path):
        return path
    parts = [part for part in (base, path) if part]
    if not parts:
        return ""
    return os.path.normpath(os.path.join(*parts))


def expand_path(path: str) -> str:
    """Expand a leading home directory and environment variables."""
    return os.path.expandvars(os.path.expanduser(path))


@dataclass
class IncludedTaskfile:
    """Where an included Taskfile lives and how it is included."""

    taskfile: str = ""
    dir: str = ""
    optional: bool = False
    internal: bool = False
    aliases: list[str] = field(default_factory=list)
    advanced_import: bool = False
    vars: Vars | None = None
    base_dir: str = ""

    @classmethod
    def from_node(cls, node: yaml.Node) -> IncludedTaskfile:
        if isinstance(node, yaml.ScalarNode):
            return cls(taskfile=_decode_str(node))
        if isinstance(node, yaml.MappingNode):
            fields = _fields(
                node, {"taskfile", "dir", "optional", "internal", "aliases", "vars"}
            )
            return cls(
                taskfile=_decode_str(fields["taskfile"]) if "taskfile" in fields else "",
                dir=_decode_str(fields["dir"]) if "dir" in fields else "",
                optional=_decode_bool(fields["optional"]) if "optional" in fields else False,
                internal=_decode_bool(fields["internal"]) if "internal" in fields else False,
                aliases=(_decode_str_list(fields["aliases"]) or []) if "aliases" in fields else [],
                advanced_import=True,
                vars=_optional_vars(fields, "vars"),
            )
        raise _unmarshal_error(node, "included taskfile")

    def deep_copy(self) -> IncludedTaskfile:
        return copy.deepcopy(self)

    def full_taskfile_path(self) -> str:
        """The absolute path of the included Taskfile."""
        return self._resolve_path(self.taskfile)

    def full_dir_path(self) -> str:
        """The absolute path of the included Taskfile's working directory."""
        return self._resolve_path(self.dir)

    def _resolve_path(self, path: str) -> str:
        path = expand_path(path)
        if os.path.isabs(path):
            return path
        try:
            return os.path.abspath(smart_join(self.base_dir, path))
        except OSError as err:
            raise OSError(
                f"task: error resolving path {path} relative to {self.base_dir}: {err}"
            ) from err


@dataclass
class IncludedTaskfiles:
    """Included Taskfiles by namespace, in the order they were declared."""

    mapping: dict[str, IncludedTaskfile] = field(default_factory=dict)

    @classmethod
    def from_node(cls, node: yaml.Node) -> IncludedTaskfiles:
        if not isinstance(node, yaml.MappingNode):
            raise _unmarshal_error(node, "included taskfiles")
        result = cls()
        for key_node, value_node in node.value:
            if _is_null(value_node):
                continue
            key = key_node.value if isinstance(key_node, yaml.ScalarNode) else ""
            result.set(key, IncludedTaskfile.from_node(value_node))
        return result

    def __len__(self) -> int:
        return len(self.mapping)

    def __contains__(self, key: object) -> bool:
        return key in self.mapping

    def merge(self, other: IncludedTaskfiles | None) -> None:
        if other is None:
            return
        for key, value in other.items():
            self.set(key, value)

    def set(self, key: str, value: IncludedTaskfile) -> None:
        self.mapping[key] = value

    def get(self, key: str) -> IncludedTaskfile | None:
        return self.mapping.get(key)

    def items(self) -> Iterator[tuple[str, IncludedTaskfile]]:
        yield from list(self.mapping.items())