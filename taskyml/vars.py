"""Ordered task variables, the call that carries them, and YAML node helpers."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Iterator

import yaml

_TAG_PREFIX = "tag:yaml.org,2002:"
_TRUE_WORDS = frozenset({"true", "yes", "on", "y"})
_FALSE_WORDS = frozenset({"false", "no", "off", "n"})


def _short_tag(node: yaml.Node) -> str:
    tag = node.tag or ""
    if tag.startswith(_TAG_PREFIX):
        return "!!" + tag[len(_TAG_PREFIX):]
    return tag


def _line(node: yaml.Node) -> int:
    return node.start_mark.line + 1


def _unmarshal_error(node: yaml.Node, target: str) -> ValueError:
    return ValueError(
        f"yaml: line {_line(node)}: cannot unmarshal {_short_tag(node)} into {target}"
    )


def _is_null(node: yaml.Node | None) -> bool:
    return isinstance(node, yaml.ScalarNode) and node.tag == _TAG_PREFIX + "null"


def _decode_str(node: yaml.Node) -> str:
    if _is_null(node):
        return ""
    if isinstance(node, yaml.ScalarNode):
        return node.value
    raise _unmarshal_error(node, "string")


def _decode_bool(node: yaml.Node) -> bool:
    if _is_null(node):
        return False
    if isinstance(node, yaml.ScalarNode):
        word = node.value.lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(
            f"yaml: line {_line(node)}: cannot unmarshal {_short_tag(node)} "
            f"`{node.value}` into bool"
        )
    raise _unmarshal_error(node, "bool")


def _decode_str_list(node: yaml.Node) -> list[str] | None:
    if _is_null(node):
        return None
    if isinstance(node, yaml.SequenceNode):
        return [_decode_str(item) for item in node.value]
    raise _unmarshal_error(node, "[]string")


def _fields(node: yaml.Node, names: set[str]) -> dict[str, yaml.Node]:
    """Pick the value nodes of the named keys out of a mapping node."""
    if not isinstance(node, yaml.MappingNode):
        raise _unmarshal_error(node, "struct")
    found: dict[str, yaml.Node] = {}
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode) and key_node.value in names:
            found[key_node.value] = value_node
    return found


def _optional_vars(fields: dict[str, yaml.Node], key: str) -> Vars | None:
    value_node = fields.get(key)
    if value_node is None or _is_null(value_node):
        return None
    return Vars.from_node(value_node)


@dataclass
class Var:
    """A variable that is either static, live (computed) or dynamic (shell)."""

    static: str = ""
    live: Any = None
    sh: str = ""
    dir: str = ""

    @classmethod
    def from_node(cls, node: yaml.Node) -> Var:
        if isinstance(node, yaml.ScalarNode):
            return cls(static=_decode_str(node))
        if isinstance(node, yaml.MappingNode):
            fields = _fields(node, {"sh"})
            sh_node = fields.get("sh")
            return cls(sh=_decode_str(sh_node) if sh_node is not None else "")
        raise _unmarshal_error(node, "variable")


@dataclass
class Vars:
    """Variables that keep the order in which they were first set."""

    mapping: dict[str, Var] = field(default_factory=dict)

    @classmethod
    def from_node(cls, node: yaml.Node) -> Vars:
        if not isinstance(node, yaml.MappingNode):
            raise _unmarshal_error(node, "variables")
        result = cls()
        for key_node, value_node in node.value:
            key = key_node.value if isinstance(key_node, yaml.ScalarNode) else ""
            result.set(key, Var.from_node(value_node))
        return result

    def deep_copy(self) -> Vars:
        return Vars({key: dataclasses.replace(value) for key, value in self.mapping.items()})

    def merge(self, other: Vars | None) -> None:
        if other is None:
            return
        for key, value in other.items():
            self.set(key, value)

    def set(self, key: str, value: Var) -> None:
        self.mapping[key] = value

    def get(self, key: str) -> Var | None:
        return self.mapping.get(key)

    def items(self) -> Iterator[tuple[str, Var]]:
        yield from list(self.mapping.items())

    def to_cache_map(self) -> dict[str, Any]:
        """Return the resolved values, leaving out unresolved shell variables."""
        cache: dict[str, Any] = {}
        for key, value in self.items():
            if value.sh:
                continue
            cache[key] = value.live if value.live is not None else value.static
        return cache

    def __len__(self) -> int:
        return len(self.mapping)

    def __contains__(self, key: object) -> bool:
        return key in self.mapping

    def __iter__(self) -> Iterator[str]:
        return iter(list(self.mapping))


@dataclass
class Call:
    """The parameters of a task call."""

    task: str = ""
    vars: Vars | None = None