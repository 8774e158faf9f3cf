# src/retro_step6502/arch/mos6502/cpu.py
"""
MOS 6502 CPUエミュレーションの中心モジュール。

フェッチ → デコード → 実行 → 次のフェッチ を終了条件まで繰り返すディスパッチャと、
命令実装が使うバスアクセス・スタック操作のプリミティブを提供します。
"""
import logging
from typing import Iterable, Optional, Union

from retro_step6502.core.errors import ProgramHalted, UnrecognizedOpcodeError
from retro_step6502.core.snapshot import HaltReason, Operation, RunResult, Snapshot
from retro_step6502.core.state import CpuState
from retro_step6502.transport.memory import DEFAULT_LOAD_ADDRESS, STACK_PAGE_START, Memory
from retro_step6502.arch.mos6502.instructions.maps import BREAK_OPCODE, OPCODE_MAP, decode_opcode

logger = logging.getLogger(__name__)


# @intent:responsibility MOS 6502 CPUの具体的なエミュレーションロジックを提供する。
class Mos6502Cpu:
    """
    MOS 6502 CPUをエミュレートするクラス。
    メモリとレジスタ状態を排他的に所有し、全ての命令実行はこのインスタンスを通して行われる。
    """
    # @intent:responsibility CPUの状態とメモリを初期化します。
    def __init__(self, memory: Optional[Memory] = None,
                 load_address: int = DEFAULT_LOAD_ADDRESS, stack_pointer: int = 0xFF):
        self.memory = memory if memory is not None else Memory()
        self._load_address = load_address & 0xFFFF
        self._initial_sp = stack_pointer & 0xFF
        self.state: CpuState = self._create_initial_state()
        self.total_cycles: int = 0
        self.instructions_executed: int = 0
        self._exit_requested: bool = False

    # @intent:responsibility 初期状態を生成する。PCはロードアドレス、SPは$FF、その他は0。
    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=self._load_address, sp=self._initial_sp)

    @property
    def load_address(self) -> int:
        return self._load_address

    # @intent:responsibility プログラムイメージをロードアドレスから書き込みます。
    def load_program(self, program: Iterable[int], address: Optional[int] = None) -> int:
        start = self._load_address if address is None else address
        count = self.memory.load(start, program)
        logger.info("Loaded %d bytes at $%04X", count, start & 0xFFFF)
        return count

    # @intent:responsibility 現在の状態の独立したコピーを返します。
    def get_state(self) -> CpuState:
        return self.state.copy()

    # --- Bus primitives ---

    # @intent:responsibility 命令実行中のサイクルを1つ消費する。
    def consume_cycle(self) -> None:
        self.state.cycles_remaining -= 1

    # @intent:responsibility メモリアクセスを伴わない内部サイクル（インデックス加算、演算など）。
    def internal_cycle(self) -> None:
        self.consume_cycle()

    # @intent:responsibility 命令ストリームから次のバイトを読み、PCを進める（1サイクル）。
    def fetch_operand(self) -> int:
        value = self.memory.read(self.state.pc)
        self.state.pc = (self.state.pc + 1) & 0xFFFF
        self.consume_cycle()
        return value

    def read(self, address: int) -> int:
        self.consume_cycle()
        return self.memory.read(address)

    def write(self, address: int, value: int) -> None:
        self.consume_cycle()
        self.memory.write(address, value)

    # --- Stack ---
    # @intent:note SPは8bitで、$00/$FF の境界を越えても検査せずに折り返す。

    # @intent:responsibility [$0100 + SP] に書き込み、SPを減らす（1サイクル）。
    def push_byte(self, value: int) -> None:
        self.write(STACK_PAGE_START | self.state.sp, value & 0xFF)
        self.state.sp = (self.state.sp - 1) & 0xFF

    # @intent:responsibility ワードを下位バイト、上位バイトの順に積む。取り出しは上位バイトが先になる。
    def push_word(self, value: int) -> None:
        self.push_byte(value & 0xFF)
        self.push_byte((value >> 8) & 0xFF)

    # @intent:responsibility [$0100 + SP + 1] を読み、SPを増やす（1サイクル）。
    def pop_byte(self) -> int:
        value = self.read(STACK_PAGE_START | ((self.state.sp + 1) & 0xFF))
        self.state.sp = (self.state.sp + 1) & 0xFF
        return value

    # @intent:responsibility push_word と対になる取り出し。上位バイト、下位バイトの順。
    def pop_word(self) -> int:
        hi = self.pop_byte()
        lo = self.pop_byte()
        return (hi << 8) | lo

    # --- Dispatcher ---

    # @intent:responsibility オペコードをフェッチしてPCを1進め、実行待ちの命令としてデコードする。
    # @intent:note オペコードのフェッチはサイクル1であり、cycles_remaining はまだ使われない。
    # @intent:post-condition BRK なら ProgramHalted、未対応なら UnrecognizedOpcodeError を送出する。
    def fetch(self) -> Operation:
        address = self.state.pc
        opcode = self.memory.read(address)
        self.state.pc = (address + 1) & 0xFFFF

        if opcode == BREAK_OPCODE:
            raise ProgramHalted(address)
        if opcode not in OPCODE_MAP:
            raise UnrecognizedOpcodeError(opcode, address)
        return decode_opcode(self.memory, address)

    # @intent:responsibility フェッチ済みの命令を実行し、実行後のSnapshotを返す。
    # @intent:pre-condition PCはオペコードの直後を指している（fetch() の直後）。
    def execute(self, operation: Operation) -> Snapshot:
        entry = OPCODE_MAP[operation.opcode]
        self.state.cycles_remaining = entry.cycles - 1

        addr_res = entry.mode.resolve(self)
        entry.execute(self, addr_res)

        if self.state.cycles_remaining != 0:
            logger.warning("%s finished with %d cycles remaining",
                           operation.render(), self.state.cycles_remaining)

        self.total_cycles += entry.cycles
        self.instructions_executed += 1
        logger.debug("%s", operation.render())
        return Snapshot(state=self.get_state(), operation=operation, total_cycles=self.total_cycles)

    # @intent:responsibility 1命令を実行する。終了条件では例外を送出する。
    def step(self) -> Snapshot:
        return self.execute(self.fetch())

    # @intent:responsibility 次のディスパッチャのチェックで実行を停止させる一度限りのフラグを立てる。
    def request_exit(self) -> None:
        self._exit_requested = True

    # @intent:responsibility ループ1回分の前半（終了フラグ確認とフェッチ）を行う。
    # @intent:return 実行待ちの命令、または終了した場合はその RunResult。
    def advance(self) -> Union[Operation, RunResult]:
        if self._exit_requested:
            self._exit_requested = False
            return self.finish(HaltReason.EXIT)
        try:
            return self.fetch()
        except ProgramHalted as e:
            return self.finish(HaltReason.BREAK, BREAK_OPCODE, e.address)
        except UnrecognizedOpcodeError as e:
            # オペレータへの報告は RunResult を受け取った呼び出し側が行う
            logger.info("%s", e)
            return self.finish(HaltReason.UNRECOGNIZED_OPCODE, e.opcode, e.address)

    # @intent:responsibility 終了条件に達するまで命令を実行し続けます。
    def run(self, max_instructions: Optional[int] = None) -> RunResult:
        """
        BRK、未対応のオペコード、exit 要求、または max_instructions 到達まで実行します。
        """
        executed = 0
        while True:
            if max_instructions is not None and executed >= max_instructions:
                return self.finish(HaltReason.LIMIT)

            outcome = self.advance()
            if isinstance(outcome, RunResult):
                return outcome

            self.execute(outcome)
            executed += 1

    # @intent:responsibility 現在の状態から終了結果を組み立てる。デバッガの停止判定でも使用する。
    def finish(self, reason: HaltReason, opcode: Optional[int] = None,
               address: Optional[int] = None) -> RunResult:
        return RunResult(
            reason=reason,
            state=self.get_state(),
            instructions_executed=self.instructions_executed,
            total_cycles=self.total_cycles,
            opcode=opcode,
            address=address,
        )
