import pytest
import yaml

from taskyml.precondition import Precondition


@pytest.mark.parametrize(
    "content, expected",
    [
        ("test -f foo.txt", Precondition(sh="test -f foo.txt", msg="`test -f foo.txt` failed")),
        ("sh: '[ 1 = 0 ]'", Precondition(sh="[ 1 = 0 ]", msg="[ 1 = 0 ] failed")),
        ('\nsh: "[ 1 = 2 ]"\nmsg: "1 is not 2"\n', Precondition(sh="[ 1 = 2 ]", msg="1 is not 2")),
    ],
)
def test_precondition_parse(content, expected):
    node = yaml.compose(content, Loader=yaml.SafeLoader)
    assert Precondition.from_node(node) == expected


def test_sequence_is_rejected():
    node = yaml.compose("[a, b]", Loader=yaml.SafeLoader)
    with pytest.raises(ValueError, match="line 1: cannot unmarshal !!seq into precondition"):
        Precondition.from_node(node)