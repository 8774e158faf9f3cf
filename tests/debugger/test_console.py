# tests/debugger/test_console.py
"""
DebugConsole（テキストREPL）の単体テスト。入力はスクリプト化して与えます。
"""
from retro_step6502.arch.mos6502.cpu import Mos6502Cpu
from retro_step6502.core.snapshot import HaltReason
from retro_step6502.debugger.console import DebugConsole
from retro_step6502.debugger.debugger import Debugger

# @intent:test_suite 対話ループの入出力の検証。


def make_console(program, inputs):
    cpu = Mos6502Cpu()
    cpu.load_program(program)
    script = iter(inputs)
    output = []

    def fake_input(prompt):
        try:
            return next(script)
        except StopIteration:
            raise EOFError from None

    console = DebugConsole(Debugger(cpu), input_func=fake_input, output_func=output.append)
    return console, output


def test_console_steps_to_break():
    console, output = make_console([0xA2, 0x05, 0xE8, 0x00], ["", ""])

    result = console.run()

    assert result.reason == HaltReason.BREAK
    assert result.state.x == 0x06
    assert output[0] == "$0200: A2 05     LDX #$05"
    assert output[2] == "$0202: E8        INX"


def test_console_reports_malformed_command_and_continues():
    console, output = make_console([0xE8, 0x00], ["bogus", ""])

    result = console.run()

    assert result.reason == HaltReason.BREAK
    assert "Unrecognized command: bogus (type 'help' for commands)" in output


def test_console_dump_then_exit():
    console, output = make_console([0xE8, 0x00], ["dump memory 0200 0201", "exit"])

    result = console.run()

    assert result.reason == HaltReason.EXIT
    assert result.state.x == 0
    assert "0200: E8 00" in output


# @intent:test_case_eof 入力が尽きた場合は exit と同じく停止することを検証します。
def test_console_eof_exits():
    console, output = make_console([0xE8, 0xE8, 0x00], [""])

    result = console.run()

    assert result.reason == HaltReason.EXIT
    assert result.instructions_executed == 1


def test_console_defaults_to_builtins(monkeypatch, capsys):
    cpu = Mos6502Cpu()
    cpu.load_program([0xC8, 0x00])
    monkeypatch.setattr("builtins.input", lambda prompt: "")

    result = DebugConsole(Debugger(cpu)).run()

    assert result.state.y == 1
    assert "INY" in capsys.readouterr().out
