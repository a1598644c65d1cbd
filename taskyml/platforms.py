"""Operating system and architecture constraints for tasks and commands."""

from __future__ import annotations

from dataclasses import dataclass

import yaml

from .vars import _is_null, _unmarshal_error

_KNOWN_OS = frozenset({
    "aix", "android", "darwin", "dragonfly", "freebsd", "hurd", "illumos",
    "ios", "js", "linux", "nacl", "netbsd", "openbsd", "plan9", "solaris",
    "wasip1", "windows", "zos",
})

_KNOWN_ARCH = frozenset({
    "386", "amd64", "amd64p32", "arm", "armbe", "arm64", "arm64be", "loong64",
    "mips", "mipsle", "mips64", "mips64le", "mips64p32", "mips64p32le", "ppc",
    "ppc64", "ppc64le", "riscv", "riscv64", "s390", "s390x", "sparc",
    "sparc64", "wasm",
})


def is_known_os(name: str) -> bool:
    return name in _KNOWN_OS


def is_known_arch(name: str) -> bool:
    return name in _KNOWN_ARCH


class InvalidPlatformError(ValueError):
    """Raised when a platform string cannot be understood."""

    def __init__(self, platform: str) -> None:
        super().__init__(f'task: Invalid platform "{platform}"')
        self.platform = platform


@dataclass
class Platform:
    """An OS, an architecture, or both."""

    os: str = ""
    arch: str = ""

    @classmethod
    def parse(cls, text: str) -> Platform:
        """Parse "OS", "Arch" or "OS/Arch"."""
        parts = text.split("/")
        if len(parts) > 2:
            raise InvalidPlatformError(text)
        platform = cls()
        try:
            platform._parse_os_or_arch(parts[0])
            if len(parts) == 2:
                platform._parse_arch(parts[1])
        except ValueError as err:
            raise InvalidPlatformError(text) from err
        return platform

    @classmethod
    def from_node(cls, node: yaml.Node) -> Platform:
        if _is_null(node):
            return cls()
        if isinstance(node, yaml.ScalarNode):
            return cls.parse(node.value)
        raise _unmarshal_error(node, "platform")

    def _parse_os_or_arch(self, value: str) -> None:
        if not value:
            raise ValueError("task: Blank OS/Arch value provided")
        if is_known_os(value):
            self.os = value
        elif is_known_arch(value):
            self.arch = value
        else:
            raise ValueError(f"task: Invalid OS/Arch value provided ({value})")

    def _parse_arch(self, value: str) -> None:
        if not value:
            raise ValueError("task: Blank Arch value provided")
        if self.arch:
            raise ValueError("task: Multiple Arch values provided")
        if not is_known_arch(value):
            raise ValueError(f"task: Invalid Arch value provided ({value})")
        self.arch = value