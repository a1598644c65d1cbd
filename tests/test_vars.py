import pytest
import yaml

from taskyml.vars import Call, Var, Vars


def node(text):
    return yaml.compose(text, Loader=yaml.SafeLoader)


def test_var_scalar_is_static():
    assert Var.from_node(node("hello")) == Var(static="hello")


def test_var_number_decodes_as_text():
    assert Var.from_node(node("42")).static == "42"


def test_var_mapping_is_dynamic():
    assert Var.from_node(node("sh: echo hi")) == Var(sh="echo hi")


def test_var_sequence_is_rejected():
    with pytest.raises(ValueError, match="cannot unmarshal !!seq into variable"):
        Var.from_node(node("[a, b]"))


def test_vars_keep_document_order():
    result = Vars.from_node(node("B: one\nA: two\nC: three\n"))
    assert [key for key, _ in result.items()] == ["B", "A", "C"]
    assert result.get("A") == Var(static="two")


def test_vars_from_scalar_is_rejected():
    with pytest.raises(ValueError, match="cannot unmarshal !!str into variables"):
        Vars.from_node(node("just text"))


def test_set_existing_key_keeps_position():
    result = Vars()
    result.set("X", Var(static="x"))
    result.set("Y", Var(static="y"))
    result.set("X", Var(static="z"))
    assert list(result) == ["X", "Y"]
    assert result.get("X").static == "z"


def test_merge_overrides_and_appends():
    first = Vars.from_node(node("A: a\nB: b\n"))
    second = Vars.from_node(node("B: bb\nC: c\n"))
    first.merge(second)
    assert list(first) == ["A", "B", "C"]
    assert first.get("B").static == "bb"


def test_merge_with_none_changes_nothing():
    original = Vars.from_node(node("A: a\n"))
    original.merge(None)
    assert original == Vars({"A": Var(static="a")})


def test_deep_copy_is_independent():
    original = Vars.from_node(node("A: a\n"))
    copied = original.deep_copy()
    assert copied == original
    copied.set("B", Var(static="b"))
    copied.get("A").dir = "elsewhere"
    assert "B" not in original
    assert original.get("A").dir == ""


def test_to_cache_map_skips_shell_and_prefers_live():
    result = Vars()
    result.set("STATIC", Var(static="s"))
    result.set("DYNAMIC", Var(sh="date"))
    result.set("LIVE", Var(static="ignored", live=["l"]))
    assert result.to_cache_map() == {"STATIC": "s", "LIVE": ["l"]}


def test_len_contains_and_missing_get():
    result = Vars.from_node(node("A: a\nB: b\n"))
    assert len(result) == 2
    assert "A" in result
    assert "Z" not in result
    assert result.get("Z") is None


def test_call_defaults():
    call = Call(task="build")
    assert call.task == "build"
    assert call.vars is None