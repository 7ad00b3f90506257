import io
import sys

import pytest

from safeshell.shell import Shell, main

PY = sys.executable


@pytest.fixture
def shell():
    return Shell(["rm -rf /"], io.StringIO(), io.StringIO())


def test_blocked_command(shell):
    assert shell.handle_line("rm -rf /\n") is True
    assert shell.blocked == 1
    assert 'ERR: Dangerous command detected ("rm -rf /")' in shell.out.getvalue()
    assert shell.stats.count == 0


def test_space_error(shell):
    shell.handle_line("echo  hi")
    assert shell.out.getvalue() == "ERR_SPACE\n"


def test_too_many_args(shell):
    shell.handle_line("echo 1 2 3 4 5 6 7")
    assert shell.out.getvalue() == "ERR_ARGS\n"


def test_empty_line_does_nothing(shell):
    assert shell.handle_line("") is True
    assert shell.out.getvalue() == ""


def test_mcalc_success_records(shell):
    shell.handle_line('mcalc "(2,2:1,2,3,4)" "(2,2:5,6,7,8)" "ADD"')
    assert shell.out.getvalue() == "Output: (2,2:6,8,10,12)\n"
    assert shell.stats.count == 1
    assert shell.log.getvalue().startswith("mcalc : ")


def test_mcalc_bad_input(shell):
    shell.handle_line('mcalc "(2,2:1,2,3,4)" "MUL"')
    assert shell.out.getvalue() == "ERR_MAT_INPUT\n"
    assert shell.stats.count == 0


def test_done_prints_blocked_count(shell):
    shell.handle_line("rm -rf /")
    assert shell.handle_line("done") is False
    assert shell.out.getvalue().endswith("1\n")


def test_successful_command_is_logged(shell):
    line = f"{PY} -c pass"
    shell.handle_line(line)
    assert shell.stats.count == 1
    assert shell.log.getvalue().startswith(f"{line} : ")
    assert shell.log.getvalue().endswith(" sec\n")


def test_warning_still_runs():
    shell = Shell([f"{PY} -c bad"], io.StringIO(), io.StringIO())
    shell.handle_line(f"{PY} -c pass")
    assert "WARNING: Command similar to dangerous command" in shell.out.getvalue()
    assert shell.stats.count == 1


def test_rlimit_show(shell):
    shell.handle_line("rlimit show")
    assert shell.out.getvalue().startswith("CPU time: ")
    assert shell.stats.count == 1
    assert shell.log.getvalue().startswith("rlimit show : ")


def test_rlimit_set_without_command(shell):
    shell.handle_line("rlimit set cpu=5")
    assert shell.out.getvalue() == "ERR\n"


def test_pipe_counts_two_commands(shell, tmp_path):
    target = tmp_path / "t.txt"
    shell.handle_line(f"{PY} -c print(7) | my_tee {target}")
    assert target.read_text() == "7\n"
    assert shell.stats.count == 2


def test_pipe_space_error(shell):
    shell.handle_line("echo  a | cat")
    assert shell.out.getvalue() == "ERR_SPACE\n"
    assert shell.stats.count == 0


def test_pipe_blocked_right(shell):
    shell.handle_line("echo a | rm -rf /")
    assert shell.blocked == 1


def test_run_prints_prompt_and_stops(shell):
    assert shell.run(io.StringIO("done\n")) == 0
    assert shell.out.getvalue().startswith(shell.stats.prompt(0))
    assert shell.out.getvalue().endswith(">>0\n")


def test_run_stops_at_eof(shell):
    assert shell.run(io.StringIO("")) == 0
    assert shell.out.getvalue() == shell.stats.prompt(0)


def test_main_requires_two_files(capsys):
    assert main([]) == 1
    assert "please include two files" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing"), str(tmp_path / "log")]) == 1
    assert capsys.readouterr().err == "ERR\n"


def test_main_runs_shell(tmp_path, monkeypatch, capsys):
    dangerous = tmp_path / "dangerous.txt"
    dangerous.write_text("rm -rf /\r\n\n")
    log = tmp_path / "log.txt"
    monkeypatch.setattr(sys, "stdin", io.StringIO("rm -rf /\ndone\n"))
    assert main([str(dangerous), str(log)]) == 0
    output = capsys.readouterr().out
    assert 'ERR: Dangerous command detected ("rm -rf /")' in output
    assert output.endswith("1\n")
    assert log.exists()