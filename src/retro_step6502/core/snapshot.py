# retro_step6502/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、デコードされた命令と、ある時点のCPU状態を記録する
不変のデータ構造を定義します。デバッガと実行ループの呼び出し元への
情報提供に用いる責務を負います。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from retro_step6502.core.state import CpuState


# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True)  # 不変データ構造
class Operation:
    """
    命令の詳細（オペコード、ニーモニック、オペランド）を記録するデータクラス。
    """
    address: int  # オペコードをフェッチしたアドレス
    opcode: int
    mnemonic: str  # 例: "LDA"
    operands: List[str] = field(default_factory=list)  # 例: ["#$05"]
    operand_bytes: List[int] = field(default_factory=list)  # 生のオペランドバイト
    cycle_count: int = 0  # 命令実行に必要な総クロックサイクル数
    length: int = 1  # 命令のバイト長

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:02X}"

    # @intent:responsibility "$0200: A2 05     LDX #$05" 形式の1行表現を返す。
    def render(self) -> str:
        raw = " ".join(f"{b:02X}" for b in [self.opcode] + list(self.operand_bytes))
        text = self.mnemonic
        if self.operands:
            text += " " + ", ".join(self.operands)
        return f"${self.address:04X}: {raw:<9} {text}"


# @intent:responsibility 1命令を実行した直後の状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    state: CpuState
    operation: Operation
    total_cycles: int


# @intent:responsibility 実行ループの終了理由を定義します。
class HaltReason(Enum):
    BREAK = "BREAK"                              # BRK オペコード
    UNRECOGNIZED_OPCODE = "UNRECOGNIZED_OPCODE"  # 未対応のオペコード
    EXIT = "EXIT"                                # デバッガからの exit コマンド
    LIMIT = "LIMIT"                              # max_instructions に到達


# @intent:responsibility 実行ループ全体の結果を記録します。
@dataclass(frozen=True)
class RunResult:
    reason: HaltReason
    state: CpuState
    instructions_executed: int
    total_cycles: int
    opcode: Optional[int] = None   # UNRECOGNIZED_OPCODE / BREAK の場合のバイト値
    address: Optional[int] = None  # そのバイトをフェッチしたアドレス
