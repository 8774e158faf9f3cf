# retro_step6502/debugger/debugger.py
"""
デバッガモジュール。

ディスパッチャのフェッチと実行の間に割り込み、実行前の命令とCPU状態を
呼び出し元へ「一時停止」として返し、オペレータのコマンドを受け付ける責務を負います。
テキストUIには依存せず、要求/応答の境界としてのみ振る舞います。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Union

from retro_step6502.arch.mos6502.cpu import Mos6502Cpu
from retro_step6502.arch.mos6502.disassembler import disassemble
from retro_step6502.common.formatting import format_state_line, hex_dump
from retro_step6502.core.errors import MalformedDebugCommandError
from retro_step6502.core.snapshot import HaltReason, Operation, RunResult, Snapshot
from retro_step6502.core.state import CpuState
from retro_step6502.transport.memory import STACK_PAGE_END, STACK_PAGE_START

# list コマンドで逆アセンブルするバイト数
LIST_LENGTH = 16

HELP_TEXT = [
    "Commands:",
    "  <enter>                      execute the pending instruction",
    "  dump stack                   dump the stack page ($0100-$01FF)",
    "  dump memory <start> <end>    dump memory between two hex addresses (inclusive)",
    "  list [<start>]               disassemble 16 bytes from <start> (default: the pending instruction)",
    "  help                         show this help",
    "  exit                         stop execution",
]


# @intent:responsibility デバッグコマンドの種類を定義します。
class DebugCommandType(Enum):
    STEP = "STEP"
    DUMP_STACK = "DUMP_STACK"
    DUMP_MEMORY = "DUMP_MEMORY"
    LIST = "LIST"
    HELP = "HELP"
    EXIT = "EXIT"


@dataclass(frozen=True)
class DebugCommand:
    command_type: DebugCommandType
    start: Optional[int] = None  # DUMP_MEMORY, LISTで使用。LISTでNoneなら保留中の命令から
    end: Optional[int] = None


# @intent:responsibility 16進アドレス文字列を解析する。"$"、"0x" の接頭辞を許容する。
def parse_address(text: str) -> int:
    digits = text.lower()
    if digits.startswith("$"):
        digits = digits[1:]
    elif digits.startswith("0x"):
        digits = digits[2:]
    try:
        value = int(digits, 16)
    except ValueError:
        raise MalformedDebugCommandError(f"Invalid hex address: {text}") from None
    if not 0 <= value <= 0xFFFF:
        raise MalformedDebugCommandError(f"Address out of range: {text}")
    return value


# @intent:responsibility オペレータの入力1行をDebugCommandに変換します。
# @intent:post-condition 解釈できない入力は MalformedDebugCommandError を送出する。
def parse_command(line: str) -> DebugCommand:
    tokens = line.strip().lower().split()
    if not tokens:
        return DebugCommand(DebugCommandType.STEP)

    if tokens == ["help"]:
        return DebugCommand(DebugCommandType.HELP)
    if tokens == ["exit"]:
        return DebugCommand(DebugCommandType.EXIT)
    if tokens == ["dump", "stack"]:
        return DebugCommand(DebugCommandType.DUMP_STACK)
    if tokens[:2] == ["dump", "memory"]:
        if len(tokens) != 4:
            raise MalformedDebugCommandError("Usage: dump memory <start-hex> <end-hex>")
        start, end = parse_address(tokens[2]), parse_address(tokens[3])
        if start > end:
            raise MalformedDebugCommandError(f"Start address ${start:04X} is greater than end address ${end:04X}")
        return DebugCommand(DebugCommandType.DUMP_MEMORY, start, end)
    if tokens[0] == "list":
        if len(tokens) > 2:
            raise MalformedDebugCommandError("Usage: list [<start-hex>]")
        start = parse_address(tokens[1]) if len(tokens) == 2 else None
        return DebugCommand(DebugCommandType.LIST, start)

    raise MalformedDebugCommandError(f"Unrecognized command: {line.strip()}")


# @intent:responsibility 逆アセンブル結果を "$0200: A2 05     LDX #$05" 形式の行にする。
def format_listing(rows) -> List[str]:
    return [f"${addr:04X}: {raw:<9} {text}" for addr, raw, text in rows]


# @intent:responsibility 実行前の命令とその時点のCPU状態を記録します。
@dataclass(frozen=True)
class Pause:
    state: CpuState
    operation: Operation

    def render(self) -> List[str]:
        return [self.operation.render(), format_state_line(self.state)]


# @intent:responsibility コマンドに対する応答。resumed が True なら次の一時停止へ進む。
@dataclass(frozen=True)
class DebugResponse:
    output: List[str] = field(default_factory=list)
    resumed: bool = False
    snapshot: Optional[Snapshot] = None


# @intent:responsibility ディスパッチャのループを1命令ずつ制御し、コマンドを処理します。
class Debugger:
    """
    CPUの実行をシングルステップで制御するクラス。

    呼び出し元は next_pause() で一時停止（または終了結果）を受け取り、
    submit() でコマンドを送る。空行で保留中の命令を実行し、exit で停止する。
    max_instructions を指定すると、その数の命令を実行した時点で LIMIT として停止する。
    """
    def __init__(self, cpu: Mos6502Cpu, max_instructions: Optional[int] = None):
        self._cpu = cpu
        self._max_instructions = max_instructions
        self._executed = 0
        self._pending: Optional[Pause] = None
        self._result: Optional[RunResult] = None

    @property
    def result(self) -> Optional[RunResult]:
        return self._result

    # @intent:responsibility 次の命令をフェッチし、実行前の状態で一時停止する。
    # @intent:return 一時停止中なら Pause、ディスパッチャが停止していれば RunResult。
    def next_pause(self) -> Union[Pause, RunResult]:
        if self._result is not None:
            return self._result
        if self._pending is not None:
            return self._pending

        if self._max_instructions is not None and self._executed >= self._max_instructions:
            self._result = self._cpu.finish(HaltReason.LIMIT)
            return self._result

        outcome = self._cpu.advance()
        if isinstance(outcome, RunResult):
            self._result = outcome
            return outcome

        self._pending = Pause(state=self._cpu.get_state(), operation=outcome)
        return self._pending

    # @intent:responsibility オペレータの入力1行を処理します。
    # @intent:pre-condition next_pause() が Pause を返している必要がある。
    def submit(self, line: str) -> DebugResponse:
        command = parse_command(line)
        if self._pending is None:
            raise RuntimeError("No instruction is pending; call next_pause() first.")

        if command.command_type == DebugCommandType.STEP:
            snapshot = self._cpu.execute(self._pending.operation)
            self._pending = None
            self._executed += 1
            return DebugResponse(resumed=True, snapshot=snapshot)

        if command.command_type == DebugCommandType.EXIT:
            # 保留中の命令は実行しない。次の next_pause() でディスパッチャが停止する。
            self._cpu.request_exit()
            self._pending = None
            return DebugResponse(resumed=True)

        if command.command_type == DebugCommandType.DUMP_STACK:
            return DebugResponse(output=hex_dump(self._cpu.memory, STACK_PAGE_START, STACK_PAGE_END))

        if command.command_type == DebugCommandType.DUMP_MEMORY:
            return DebugResponse(output=hex_dump(self._cpu.memory, command.start, command.end))

        if command.command_type == DebugCommandType.LIST:
            start = self._pending.operation.address if command.start is None else command.start
            return DebugResponse(output=format_listing(disassemble(self._cpu.memory, start, LIST_LENGTH)))

        return DebugResponse(output=list(HELP_TEXT))
