import os

import pytest
import yaml

from taskyml.included import (
    IncludedTaskfile,
    IncludedTaskfiles,
    expand_path,
    smart_join,
)
from taskyml.vars import Var


def node(text):
    return yaml.compose(text)


def test_scalar_include():
    inc = IncludedTaskfile.from_node(node("./docs"))
    assert inc.taskfile == "./docs"
    assert inc.advanced_import is False


def test_mapping_include_is_advanced():
    text = "taskfile: ./sub\ndir: ./sub\noptional: true\ninternal: true\naliases: [s]\nvars:\n  K: v\n"
    inc = IncludedTaskfile.from_node(node(text))
    assert inc.taskfile == "./sub"
    assert inc.dir == "./sub"
    assert inc.optional is True
    assert inc.internal is True
    assert inc.aliases == ["s"]
    assert inc.advanced_import is True
    assert inc.vars.get("K") == Var(static="v")


def test_sequence_include_raises():
    with pytest.raises(ValueError, match="into included taskfile"):
        IncludedTaskfile.from_node(node("- a"))


def test_collection_keeps_order_and_skips_null():
    incs = IncludedTaskfiles.from_node(node("zeta: ./z\nalpha: ./a\nempty:\n"))
    assert [key for key, _ in incs.items()] == ["zeta", "alpha"]
    assert len(incs) == 2


def test_collection_rejects_sequence():
    with pytest.raises(ValueError, match="into included taskfiles"):
        IncludedTaskfiles.from_node(node("- a"))


def test_set_existing_key_keeps_position_and_merge():
    incs = IncludedTaskfiles()
    incs.set("a", IncludedTaskfile(taskfile="1"))
    incs.set("b", IncludedTaskfile(taskfile="2"))
    other = IncludedTaskfiles()
    other.set("a", IncludedTaskfile(taskfile="3"))
    other.set("c", IncludedTaskfile(taskfile="4"))
    incs.merge(other)
    incs.merge(None)
    assert [(k, v.taskfile) for k, v in incs.items()] == [
        ("a", "3"), ("b", "2"), ("c", "4")
    ]


def test_smart_join():
    assert smart_join("base", os.path.abspath("abs")) == os.path.abspath("abs")
    assert smart_join("a", "b") == os.path.join("a", "b")
    assert smart_join("a", "./b/../c") == os.path.join("a", "c")
    assert smart_join("", "") == ""


def test_full_paths_relative_to_base(tmp_path):
    inc = IncludedTaskfile(taskfile="sub/Taskfile.yml", dir="sub", base_dir=str(tmp_path))
    assert inc.full_taskfile_path() == str(tmp_path / "sub" / "Taskfile.yml")
    assert inc.full_dir_path() == str(tmp_path / "sub")


def test_absolute_path_kept(tmp_path):
    target = str(tmp_path / "Taskfile.yml")
    inc = IncludedTaskfile(taskfile=target, base_dir="/elsewhere")
    assert inc.full_taskfile_path() == target


def test_env_variable_expanded(tmp_path, monkeypatch):
    monkeypatch.setenv("INC_DIR", str(tmp_path))
    inc = IncludedTaskfile(dir="$INC_DIR/x")
    assert inc.full_dir_path() == str(tmp_path / "x")


def test_expand_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert expand_path("~/a") == str(tmp_path / "a")


def test_deep_copy_independent():
    inc = IncludedTaskfile.from_node(node("taskfile: t\naliases: [x]\nvars:\n  A: b\n"))
    copied = inc.deep_copy()
    assert copied == inc
    copied.aliases.append("y")
    copied.vars.set("C", Var(static="d"))
    assert inc.aliases == ["x"]
    assert "C" not in inc.vars