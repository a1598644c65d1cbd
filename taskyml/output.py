"""Output style settings of a Taskfile."""

from __future__ import annotations

from dataclasses import dataclass, field

import yaml

from .vars import _decode_str, _fields, _is_null, _unmarshal_error


@dataclass
class OutputGroup:
    """Begin and end markers for the group output style."""

    begin: str = ""
    end: str = ""

    def is_set(self) -> bool:
        return bool(self.begin or self.end)

    @classmethod
    def _from_node(cls, node: yaml.Node) -> OutputGroup:
        fields = _fields(node, {"begin", "end"})
        return cls(
            begin=_decode_str(fields["begin"]) if "begin" in fields else "",
            end=_decode_str(fields["end"]) if "end" in fields else "",
        )


@dataclass
class Output:
    """The chosen output style and its group options."""

    name: str = ""
    group: OutputGroup = field(default_factory=OutputGroup)

    def is_set(self) -> bool:
        return bool(self.name)

    @classmethod
    def from_node(cls, node: yaml.Node) -> Output:
        if isinstance(node, yaml.ScalarNode):
            return cls(name=_decode_str(node))
        if isinstance(node, yaml.MappingNode):
            group_node = _fields(node, {"group"}).get("group")
            if group_node is None or _is_null(group_node):
                raise ValueError(
                    'task: output style must have the "group" key when in mapping form'
                )
            try:
                group = OutputGroup._from_node(group_node)
            except ValueError as err:
                raise ValueError(
                    "task: output style must be a string or mapping with a "
                    f'"group" key: {err}'
                ) from err
            return cls(name="group", group=group)
        raise _unmarshal_error(node, "output")