# retro_step6502/core/state.py
"""
Core Layer (CPU状態)

このモジュールは、6502のレジスタ群とステータスフラグを保持するデータ構造を定義します。
"""
from dataclasses import dataclass, field, replace

from retro_step6502.transport.memory import DEFAULT_LOAD_ADDRESS

# 表示・レポートで用いるフラグの固定順序
FLAG_ORDER = ("c", "z", "i", "d", "b", "v", "n")


# @intent:responsibility 7つの独立したステータスフラグを名前付きフィールドとして保持します。
# @intent:rationale ビット位置によるフラグ指定の取り違えを避けるため、ビットベクタではなく名前で扱う。
@dataclass
class StatusFlags:
    """
    6502のステータスフラグ。
    実装済みの命令が計算するのは C, Z, V, N のみで、I, D, B は保持されるだけです。
    """
    c: bool = False  # Carry
    z: bool = False  # Zero
    i: bool = False  # Interrupt Disable
    d: bool = False  # Decimal Mode
    b: bool = False  # Break Command
    v: bool = False  # Overflow
    n: bool = False  # Negative

    # @intent:responsibility C, Z, I, D, B, V, N の順で7文字のビット列を返す。
    def to_bit_string(self) -> str:
        return "".join("1" if getattr(self, name) else "0" for name in FLAG_ORDER)

    # @intent:responsibility 指定されたフラグのみを更新します。未知のフラグ名はエラーとする。
    def update(self, **kwargs: bool) -> None:
        for flag_name, value in kwargs.items():
            if flag_name not in FLAG_ORDER:
                raise AttributeError(f"Unknown status flag: {flag_name}")
            setattr(self, flag_name, bool(value))


# @intent:responsibility CPUのレジスタ状態とサイクルのカウントダウンを保持します。
@dataclass
class CpuState:
    """
    6502のレジスタ状態。

    a, x, y, sp は8bit、pc は16bitで、値は常にそれぞれの幅に収まるよう
    命令実装側で切り捨てられます。
    cycles_remaining は命令開始時に (総サイクル数 - 1) に設定され、
    以降のメモリアクセスやレジスタ更新ごとに1ずつ減算されます。
    """
    a: int = 0
    x: int = 0
    y: int = 0
    pc: int = DEFAULT_LOAD_ADDRESS  # Program Counter
    sp: int = 0xFF                  # Stack Pointer ($0100 + sp)
    flags: StatusFlags = field(default_factory=StatusFlags)
    cycles_remaining: int = 0

    # @intent:responsibility dataclasses.replaceのラッパー。flagsも複製し、元の状態と共有しない。
    def replace(self, **changes) -> 'CpuState':
        if "flags" not in changes:
            changes["flags"] = replace(self.flags)
        return replace(self, **changes)

    # @intent:responsibility Snapshotなどに保存するための独立したコピーを返す。
    def copy(self) -> 'CpuState':
        return self.replace()
