import pytest
import yaml

from taskyml.cmd import Cmd, Dep
from taskyml.precondition import Precondition
from taskyml.task import Task
from taskyml.vars import Var


def node(text):
    return yaml.compose(text)


def test_scalar_is_single_command():
    task = Task.from_node(node("echo hi"))
    assert task.cmds == [Cmd(cmd="echo hi")]
    assert task.deps == []


def test_sequence_is_command_list():
    task = Task.from_node(node("- echo a\n- task: other\n"))
    assert task.cmds == [Cmd(cmd="echo a"), Cmd(task="other")]


def test_full_mapping():
    text = (
        "desc: Build it\n"
        "label: builder\n"
        "deps: [setup]\n"
        "aliases: [b]\n"
        "ignore_error: true\n"
        "silent: yes\n"
        "dir: out\n"
        "vars:\n  A: one\n"
        "preconditions:\n  - test -f x\n"
        "cmds:\n  - echo a\n"
    )
    task = Task.from_node(node(text))
    assert task.desc == "Build it"
    assert task.label == "builder"
    assert task.deps == [Dep(task="setup")]
    assert task.aliases == ["b"]
    assert task.ignore_error is True
    assert task.silent is True
    assert task.dir == "out"
    assert task.vars.get("A") == Var(static="one")
    assert task.preconditions == [Precondition(sh="test -f x", msg="`test -f x` failed")]
    assert task.cmds == [Cmd(cmd="echo a")]


def test_null_elements_are_skipped():
    text = "cmds:\n  - echo a\n  -\n  - echo b\ndeps:\n  -\n  - d\n"
    task = Task.from_node(node(text))
    assert task.cmds == [Cmd(cmd="echo a"), Cmd(cmd="echo b")]
    assert task.deps == [Dep(task="d")]


def test_name_prefers_label():
    assert Task(task="build", label="nice").name() == "nice"
    assert Task(task="build").name() == "build"


def test_deep_copy_is_independent():
    original = Task.from_node(node("aliases: [x]\ncmds:\n  - task: y\nvars:\n  V: v\n"))
    copied = original.deep_copy()
    assert copied == original
    copied.aliases.append("z")
    copied.cmds[0].task = "changed"
    copied.vars.set("W", Var(static="w"))
    assert original.aliases == ["x"]
    assert original.cmds[0].task == "y"
    assert "W" not in original.vars


def test_wrong_list_type_raises():
    with pytest.raises(ValueError, match="cannot unmarshal"):
        Task.from_node(node("cmds: 5"))


def test_bad_bool_raises():
    with pytest.raises(ValueError, match="into bool"):
        Task.from_node(node("silent: maybe"))