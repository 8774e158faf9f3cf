# tests/debugger/test_debugger.py
"""
retro_step6502.debugger.debuggerモジュールの単体テスト。
一時停止/コマンドの要求応答、履歴、exit の挙動、およびコマンド解析を検証します。
"""
import pytest

from retro_step6502.arch.mos6502.cpu import Mos6502Cpu
from retro_step6502.core.errors import MalformedDebugCommandError
from retro_step6502.core.snapshot import HaltReason, RunResult
from retro_step6502.debugger.debugger import (
    DebugCommandType, Debugger, HELP_TEXT, Pause, parse_address, parse_command,
)

# @intent:test_suite デバッガの実行制御とコマンド処理の検証。

# LDX #$05 ; LDY #$07 ; BRK
PROGRAM = [0xA2, 0x05, 0xA0, 0x07, 0x00]


class TestDebugger:
    """
    Debuggerの単体テスト。
    """
    @pytest.fixture
    def setup_debugger(self):
        cpu = Mos6502Cpu()
        cpu.load_program(PROGRAM)
        return Debugger(cpu), cpu

    # @intent:test_case_pause_before_execute 実行前の命令とフェッチ直後の状態で停止することを検証します。
    def test_first_pause(self, setup_debugger):
        debugger, cpu = setup_debugger
        pause = debugger.next_pause()

        assert isinstance(pause, Pause)
        assert pause.operation.mnemonic == "LDX"
        assert pause.operation.address == 0x0200
        assert pause.state.pc == 0x0201
        assert pause.state.x == 0
        assert pause.render() == [
            "$0200: A2 05     LDX #$05",
            "A=$00 X=$00 Y=$00 PC=$0201 SP=$FF CZIDBVN=0000000 CYC=0",
        ]

    def test_next_pause_is_idempotent(self, setup_debugger):
        debugger, cpu = setup_debugger
        first = debugger.next_pause()
        assert debugger.next_pause() is first
        assert cpu.state.pc == 0x0201

    def test_step_executes_pending_instruction(self, setup_debugger):
        debugger, cpu = setup_debugger
        debugger.next_pause()

        response = debugger.submit("")

        assert response.resumed
        assert response.output == []
        assert response.snapshot.state.x == 0x05
        assert response.snapshot.total_cycles == 2

        pause = debugger.next_pause()
        assert pause.operation.mnemonic == "LDY"

    def test_runs_to_break(self, setup_debugger):
        debugger, cpu = setup_debugger
        for _ in range(2):
            debugger.next_pause()
            debugger.submit("")

        result = debugger.next_pause()

        assert isinstance(result, RunResult)
        assert result.reason == HaltReason.BREAK
        assert result.state.x == 0x05
        assert result.state.y == 0x07
        assert debugger.result is result
        assert debugger.next_pause() is result

    # @intent:test_case_exit exit で保留中の命令を実行せずに停止することを検証します。
    def test_exit_skips_pending_instruction(self, setup_debugger):
        debugger, cpu = setup_debugger
        debugger.next_pause()
        debugger.submit("")
        debugger.next_pause()  # LDY pending

        response = debugger.submit("exit")
        assert response.resumed

        result = debugger.next_pause()
        assert result.reason == HaltReason.EXIT
        assert result.state.y == 0
        assert result.instructions_executed == 1

    def test_dump_stack_does_not_resume(self, setup_debugger):
        debugger, cpu = setup_debugger
        pause = debugger.next_pause()
        cpu.memory.write(0x01FF, 0xAB)

        response = debugger.submit("dump stack")

        assert not response.resumed
        assert len(response.output) == 16
        assert response.output[0].startswith("0100: 00")
        assert response.output[-1].endswith("AB")
        assert debugger.next_pause() is pause

    def test_dump_memory(self, setup_debugger):
        debugger, _ = setup_debugger
        debugger.next_pause()

        response = debugger.submit("dump memory $0200 0x0204")

        assert response.output == ["0200: A2 05 A0 07 00"]
        assert not response.resumed

    def test_help(self, setup_debugger):
        debugger, _ = setup_debugger
        debugger.next_pause()
        response = debugger.submit("HELP")
        assert response.output == HELP_TEXT
        assert not response.resumed

    def test_malformed_command_leaves_state(self, setup_debugger):
        debugger, cpu = setup_debugger
        pause = debugger.next_pause()
        before = cpu.get_state()

        with pytest.raises(MalformedDebugCommandError):
            debugger.submit("jump 0300")

        assert cpu.get_state() == before
        assert debugger.next_pause() is pause

    def test_submit_without_pause(self, setup_debugger):
        debugger, _ = setup_debugger
        with pytest.raises(RuntimeError):
            debugger.submit("")

    # @intent:test_case_limit 命令数の上限に達すると、次の命令の前で LIMIT として停止することを検証します。
    def test_max_instructions_limit(self):
        cpu = Mos6502Cpu()
        cpu.load_program([0xE8, 0xE8, 0xE8, 0x00])  # INX x3 ; BRK
        debugger = Debugger(cpu, max_instructions=1)

        debugger.next_pause()
        debugger.submit("")
        result = debugger.next_pause()

        assert isinstance(result, RunResult)
        assert result.reason == HaltReason.LIMIT
        assert result.instructions_executed == 1
        assert result.state.x == 0x01
        assert result.state.pc == 0x0201

    def test_commands_do_not_count_toward_limit(self):
        cpu = Mos6502Cpu()
        cpu.load_program([0xE8, 0xE8, 0x00])
        debugger = Debugger(cpu, max_instructions=1)

        debugger.next_pause()
        debugger.submit("help")
        debugger.submit("dump stack")
        response = debugger.submit("")

        assert response.snapshot.state.x == 0x01
        assert debugger.next_pause().reason == HaltReason.LIMIT

    def test_list_from_pending_instruction(self, setup_debugger):
        debugger, cpu = setup_debugger
        debugger.next_pause()
        debugger.submit("")
        debugger.next_pause()  # LDY pending

        response = debugger.submit("list")

        assert not response.resumed
        assert response.output[:2] == [
            "$0202: A0 07     LDY #$07",
            "$0204: 00        BRK",
        ]
        assert cpu.state.pc == 0x0203

    def test_list_from_address(self, setup_debugger):
        debugger, cpu = setup_debugger
        cpu.memory.load(0x0300, [0x20, 0x21, 0x02, 0xFF])
        debugger.next_pause()

        response = debugger.submit("list $0300")

        assert response.output[:2] == [
            "$0300: 20 21 02  JSR $0221",
            "$0303: FF        DB $FF",
        ]


class TestParseCommand:
    @pytest.mark.parametrize("line, expected", [
        ("", DebugCommandType.STEP),
        ("   ", DebugCommandType.STEP),
        ("help", DebugCommandType.HELP),
        ("exit", DebugCommandType.EXIT),
        ("Dump Stack", DebugCommandType.DUMP_STACK),
        ("list", DebugCommandType.LIST),
    ])
    def test_simple_commands(self, line, expected):
        assert parse_command(line).command_type == expected

    def test_list_with_start(self):
        command = parse_command("list 0x0300")
        assert command.command_type == DebugCommandType.LIST
        assert command.start == 0x0300

    def test_dump_memory_range(self):
        command = parse_command("dump memory 0010 00ff")
        assert command.command_type == DebugCommandType.DUMP_MEMORY
        assert (command.start, command.end) == (0x0010, 0x00FF)

    @pytest.mark.parametrize("line", [
        "dump memory 0010",
        "dump memory 0200 0100",
        "dump memory zz 0100",
        "dump memory 0000 10000",
        "dump",
        "step",
        "list 0300 8",
        "list nowhere",
    ])
    def test_malformed(self, line):
        with pytest.raises(MalformedDebugCommandError):
            parse_command(line)

    def test_parse_address_prefixes(self):
        assert parse_address("$1234") == 0x1234
        assert parse_address("0xFF") == 0xFF
        assert parse_address("abcd") == 0xABCD
