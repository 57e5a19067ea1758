import os

import pytest

from minishellpy.builtins import (
    ShellExit,
    cd,
    echo,
    env,
    execute_builtin,
    exit_builtin,
    export,
    is_builtin,
    pwd,
    unset,
)
from minishellpy.shell import Shell


def make_shell(interactive=True, **variables):
    return Shell.from_environ(variables, interactive=interactive)


@pytest.mark.parametrize("name", ["echo", "cd", "pwd", "export", "unset", "env", "exit"])
def test_is_builtin_true(name):
    assert is_builtin(name) is True


@pytest.mark.parametrize("name", ["ls", "", None, "ECHO"])
def test_is_builtin_false(name):
    assert is_builtin(name) is False


def test_echo_plain(capsys):
    assert echo(["echo", "hello", "world"]) == 0
    assert capsys.readouterr().out == "hello world\n"


def test_echo_no_args(capsys):
    assert echo(["echo"]) == 0
    assert capsys.readouterr().out == "\n"


def test_echo_n_flags(capsys):
    assert echo(["echo", "-n", "-nnn", "a", "-n"]) == 0
    assert capsys.readouterr().out == "a -n"


def test_echo_dash_alone_is_text(capsys):
    echo(["echo", "-", "x"])
    assert capsys.readouterr().out == "- x\n"


def test_echo_invalid_flag_is_text(capsys):
    echo(["echo", "-nx", "y"])
    assert capsys.readouterr().out == "-nx y\n"


def test_pwd_prints_cwd(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert pwd() == 0
    assert capsys.readouterr().out == os.getcwd() + "\n"


def test_cd_changes_directory_and_sets_vars(tmp_path, monkeypatch):
    start = tmp_path / "start"
    target = tmp_path / "target"
    start.mkdir()
    target.mkdir()
    monkeypatch.chdir(start)
    shell = make_shell()
    before = os.getcwd()
    assert cd(["cd", str(target)], shell) == 0
    assert os.getcwd() == os.path.realpath(target)
    assert shell.env.get("PWD") == os.getcwd()
    assert shell.env.get("OLDPWD") == before
    assert f"PWD={os.getcwd()}" in shell.env_array
    assert shell.exit_status == 0


def test_cd_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    shell = make_shell(HOME=str(home))
    assert cd(["cd"], shell) == 0
    assert os.getcwd() == os.path.realpath(home)


def test_cd_home_not_set(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    shell = make_shell()
    assert cd(["cd"], shell) == 1
    assert "minishell: cd: HOME not set" in capsys.readouterr().err
    assert shell.exit_status == 1


def test_cd_missing_directory(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    shell = make_shell()
    missing = str(tmp_path / "nope")
    assert cd(["cd", missing], shell) == 1
    assert f"minishell: cd: {missing}: " in capsys.readouterr().err
    assert os.getcwd() == os.path.realpath(tmp_path)


def test_cd_too_many_args_does_nothing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    shell = make_shell()
    assert cd(["cd", "a", "b"], shell) == 0
    assert os.getcwd() == os.path.realpath(tmp_path)


def test_export_sets_variable():
    shell = make_shell()
    assert export(["export", "FOO=bar=baz"], shell) == 0
    assert shell.env.get("FOO") == "bar=baz"
    assert "FOO=bar=baz" in shell.env_array


def test_export_without_value_keeps_existing():
    shell = make_shell(FOO="keep")
    assert export(["export", "FOO", "NEW"], shell) == 0
    assert shell.env.get("FOO") == "keep"
    assert shell.env.get("NEW") == ""


def test_export_invalid_identifier(capsys):
    shell = make_shell()
    assert export(["export", "1BAD=x", "GOOD=y"], shell) == 1
    assert "minishell: export: `1BAD=x': not a valid identifier" in capsys.readouterr().err
    assert shell.exit_status == 1
    assert "GOOD" not in shell.env


def test_export_lists_variables(capsys):
    shell = make_shell(A="1")
    assert export(["export"], shell) == 0
    assert capsys.readouterr().out == 'declare -x A="1"\n'


def test_unset_removes():
    shell = make_shell(A="1", B="2")
    assert unset(["unset", "A", "MISSING"], shell) == 0
    assert "A" not in shell.env
    assert shell.env_array == ["B=2"]


def test_env_prints_all(capsys):
    shell = make_shell(A="1", B="2")
    assert env(shell) == 0
    assert capsys.readouterr().out == "A=1\nB=2\n"


def test_exit_without_args_uses_last_status(capsys):
    shell = make_shell()
    shell.exit_status = 7
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit"], shell)
    assert info.value.status == 7
    assert capsys.readouterr().out == "exit\n"


def test_exit_with_number():
    shell = make_shell()
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "+42"], shell)
    assert info.value.status == 42


def test_exit_status_wraps():
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "256"], make_shell())
    assert info.value.status == 0


def test_exit_non_numeric_interactive(capsys):
    shell = make_shell(interactive=True)
    assert exit_builtin(["exit", "abc"], shell) == 2
    assert "minishell: exit: abc: numeric argument required" in capsys.readouterr().err
    assert shell.exit_status == 2


def test_exit_non_numeric_non_interactive():
    shell = make_shell(interactive=False)
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "-"], shell)
    assert info.value.status == 2


def test_exit_too_many_args_interactive(capsys):
    shell = make_shell(interactive=True)
    assert exit_builtin(["exit", "1", "2"], shell) == 1
    assert "minishell: exit: too many arguments" in capsys.readouterr().err
    assert shell.exit_status == 1


def test_exit_too_many_args_non_interactive():
    with pytest.raises(ShellExit) as info:
        exit_builtin(["exit", "1", "2"], make_shell(interactive=False))
    assert info.value.status == 1


def test_execute_builtin_dispatch(capsys):
    shell = make_shell()
    assert execute_builtin(["echo", "hi"], shell) == 0
    assert capsys.readouterr().out == "hi\n"
    assert execute_builtin(["export", "X=1"], shell) == 0
    assert shell.env.get("X") == "1"


def test_execute_builtin_unknown_or_empty():
    shell = make_shell()
    assert execute_builtin([], shell) == 1
    assert execute_builtin(["ls"], shell) == 1