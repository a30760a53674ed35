import io
import os
from pathlib import Path

import pytest

from minish.builtins import (
    OLDPWD_NOT_SET,
    ShellExit,
    cd,
    echo,
    env_command,
    exit_command,
    is_builtin,
    pwd,
    run_builtin,
    unset,
)
from minish.environment import Environment, ShellState


def make_state(*entries):
    pairs = [(entry.partition("=")[0], entry) for entry in entries]
    return ShellState(env=Environment(pairs))


def streams():
    return io.StringIO(), io.StringIO()


@pytest.mark.parametrize("name", ["echo", "cd", "export", "unset", "exit", "pwd", "env"])
def test_is_builtin_true(name):
    assert is_builtin(name) is True


def test_is_builtin_false():
    assert is_builtin("ls") is False
    assert is_builtin(None) is False


def test_echo_without_args_prints_newline():
    out = io.StringIO()
    echo([], out)
    assert out.getvalue() == "\n"


def test_echo_words_each_followed_by_space():
    out = io.StringIO()
    assert echo(["hello", "world"], out) == 0
    assert out.getvalue() == "hello world \n"


def test_echo_n_flag_suppresses_newline():
    out = io.StringIO()
    echo(["-n", "hi"], out)
    assert out.getvalue() == "hi"


def test_echo_repeated_n_flags_skipped():
    out = io.StringIO()
    echo(["-nnn", "-n", "a", "b"], out)
    assert out.getvalue() == "a b"


def test_echo_invalid_flag_is_printed():
    out = io.StringIO()
    echo(["-nx", "a"], out)
    assert out.getvalue().startswith("-nx")
    assert out.getvalue().endswith("\n")


def test_env_lists_only_entries_with_values():
    state = make_state("A=1", "B")
    out, err = streams()
    assert env_command(["env"], state, out, err) == 0
    assert out.getvalue().splitlines() == ["A=1"]


def test_env_refuses_arguments():
    state = make_state("A=1")
    out, err = streams()
    assert env_command(["env", "x"], state, out, err) == 1
    assert "Too Many Argument" in err.getvalue()
    assert out.getvalue() == ""


def test_exit_without_args():
    out, err = streams()
    with pytest.raises(ShellExit) as info:
        exit_command(["exit"], make_state(), out, err)
    assert info.value.code == 0
    assert err.getvalue() == "exit\n"


def test_exit_with_number():
    state = make_state()
    out, err = streams()
    with pytest.raises(ShellExit) as info:
        exit_command(["exit", "42"], state, out, err)
    assert info.value.code == 42
    assert state.status == 42


def test_exit_non_numeric():
    out, err = streams()
    with pytest.raises(ShellExit) as info:
        exit_command(["exit", "abc"], make_state(), out, err)
    assert info.value.code == 255
    assert "numeric argument required" in err.getvalue()


def test_exit_too_many_arguments_does_not_exit():
    state = make_state()
    out, err = streams()
    assert run_builtin(["exit", "1", "2"], state, out, err) == 1
    assert "oo many arguments" in err.getvalue()


def test_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    pwd(out)
    assert out.getvalue() == os.getcwd() + "\n"


def test_cd_updates_pwd_and_oldpwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "sub"
    target.mkdir()
    before = os.getcwd()
    state = make_state("PWD=" + before)
    out, err = streams()
    cd(["cd", str(target)], state, out, err)
    assert Path.cwd().resolve() == target.resolve()
    assert state.env.lookup("PWD") == os.getcwd()
    assert state.env.lookup("OLDPWD") == before
    assert state.env.names() == ["PWD", "OLDPWD"]


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    state = make_state()
    out, err = streams()
    status = run_builtin(["cd", str(tmp_path / "nope")], state, out, err)
    assert status == 1
    assert out.getvalue() == "Directory does not exist\n"
    assert Path.cwd().resolve() == tmp_path.resolve()


def test_cd_into_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    target = tmp_path / "file.txt"
    target.write_text("data")
    out, err = streams()
    assert cd(["cd", str(target)], make_state(), out, err) == 1
    assert out.getvalue() == "is not a directory\n"


def test_cd_home(tmp_path, monkeypatch):
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(home))
    before = os.getcwd()
    state = make_state()
    out, err = streams()
    cd(["cd"], state, out, err)
    assert Path.cwd().resolve() == home.resolve()
    assert state.env.lookup("PWD") == os.getcwd()
    assert state.env.lookup("OLDPWD") == before
    home_cwd = os.getcwd()
    cd(["cd", "~"], state, out, err)
    assert Path.cwd().resolve() == home.resolve()
    assert state.env.lookup("OLDPWD") == home_cwd


def test_cd_dot_stays(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out, err = streams()
    cd(["cd", "."], make_state(), out, err)
    assert Path.cwd().resolve() == tmp_path.resolve()
    assert err.getvalue() == ""


def test_cd_dash_without_oldpwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out, err = streams()
    cd(["cd", "-"], make_state(), out, err)
    assert err.getvalue() == OLDPWD_NOT_SET
    assert Path.cwd().resolve() == tmp_path.resolve()


def test_cd_dash_toggles(tmp_path, monkeypatch):
    first = tmp_path / "a"
    second = tmp_path / "b"
    first.mkdir()
    second.mkdir()
    monkeypatch.chdir(first)
    state = make_state()
    out, err = streams()
    cd(["cd", str(second)], state, out, err)
    cd(["cd", "-"], state, out, err)
    assert Path.cwd().resolve() == first.resolve()
    assert out.getvalue().splitlines()[-1] == os.getcwd()
    cd(["cd", "-"], state, out, err)
    assert Path.cwd().resolve() == second.resolve()


def test_unset_removes_named_variable():
    state = make_state("A=1", "B=2", "C=3")
    unset(["unset", "B"], state)
    assert state.env.names() == ["A", "C"]


def test_unset_head_when_first_argument():
    state = make_state("A=1", "B=2", "C=3")
    unset(["unset", "A"], state)
    assert state.env.names() == ["B", "C"]


def test_unset_head_ignored_in_later_arguments():
    state = make_state("A=1", "B=2", "C=3")
    unset(["unset", "B", "A"], state)
    assert state.env.names() == ["A", "C"]


def test_run_builtin_echo_sets_status():
    state = make_state()
    state.status = 7
    out, err = streams()
    assert run_builtin(["echo", "-n", "x"], state, out, err) == 0
    assert out.getvalue() == "x"