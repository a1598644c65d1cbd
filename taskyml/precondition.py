"""Preconditions that must hold before a task runs."""

from __future__ import annotations

from dataclasses import dataclass

import yaml

from .vars import _decode_str, _fields, _unmarshal_error


@dataclass
class Precondition:
    """A shell check and the message shown when it fails."""

    sh: str = ""
    msg: str = ""

    @classmethod
    def from_node(cls, node: yaml.Node) -> Precondition:
        if isinstance(node, yaml.ScalarNode):
            command = _decode_str(node)
            return cls(sh=command, msg=f"`{command}` failed")
        if isinstance(node, yaml.MappingNode):
            fields = _fields(node, {"sh", "msg"})
            sh = _decode_str(fields["sh"]) if "sh" in fields else ""
            msg = _decode_str(fields["msg"]) if "msg" in fields else ""
            return cls(sh=sh, msg=msg or f"{sh} failed")
        raise _unmarshal_error(node, "precondition")