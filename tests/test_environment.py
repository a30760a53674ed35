from minish.environment import Environment, ShellState, from_environ
from minish.tokens import PATH_STD


def test_empty_environ_gets_defaults():
    env = from_environ({}, "/work")
    assert env.names() == ["PATH", "SHLVL", "PWD"]
    assert env.lookup("PATH") == PATH_STD
    assert env.lookup("SHLVL") == "1"
    assert env.lookup("PWD") == "/work"


def test_environ_entries_keep_order_and_value():
    env = from_environ({"A": "b=c", "HOME": "/h"}, "/")
    assert env.entry("A") == "A=b=c"
    assert env.lookup("A") == "b=c"
    assert env.exported() == ["A=b=c", "HOME=/h"]
    assert len(env) == 2


def test_lookup_missing_is_none():
    env = from_environ({"A": "1"}, "/")
    assert env.lookup("B") is None
    assert env.entry("B") is None


def test_define_without_value():
    env = Environment()
    env.define("FOO", "FOO")
    assert "FOO" in env
    assert env.lookup("FOO") is None
    assert env.exported() == ["FOO"]


def test_set_value_keeps_position():
    env = from_environ({"A": "1", "B": "2"}, "/")
    env.set_value("A", "x")
    env.set_value("C", "y")
    assert env.names() == ["A", "B", "C"]
    assert env.lookup("A") == "x"
    assert env.lookup("C") == "y"


def test_append_value_extends_existing():
    env = Environment()
    env.set_value("X", "a")
    env.append_value("X", "b")
    assert env.lookup("X") == "a" + "b"


def test_append_value_on_missing_or_valueless():
    env = Environment()
    env.append_value("X", "v")
    env.define("Y", "Y")
    env.append_value("Y", "w")
    assert env.lookup("X") == "v"
    assert env.lookup("Y") == "w"


def test_unset():
    env = from_environ({"A": "1", "B": "2"}, "/")
    assert env.unset("A") is True
    assert "A" not in env
    assert env.names() == ["B"]
    assert env.unset("A") is False


def test_search_path_takes_first_name_containing_path():
    env = Environment()
    env.set_value("MANPATH", "/m")
    env.set_value("PATH", "/p")
    assert env.search_path() == "/m"


def test_search_path_plain_and_missing():
    env = Environment()
    assert env.search_path() is None
    env.set_value("PATH", "/p")
    assert env.search_path() == "/p"


def test_iteration_yields_names():
    env = from_environ({"A": "1", "B": "2"}, "/")
    assert list(env) == env.names()


def test_shell_state_defaults():
    state = ShellState()
    assert state.status == 0
    assert len(state.env) == 0
    assert state.heredoc_count == 0