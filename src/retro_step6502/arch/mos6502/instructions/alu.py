# src/retro_step6502/arch/mos6502/instructions/alu.py
"""
MOS 6502 算術演算命令 (ADC, SBC, INC, INX, INY)。
10進モード（D フラグ）は非対応で、常にバイナリ演算として扱う。
"""
from typing import TYPE_CHECKING, NamedTuple

from retro_step6502.arch.mos6502.instructions.base import AddressingResult
from retro_step6502.arch.mos6502.instructions.load import read_operand, update_nz

if TYPE_CHECKING:
    from retro_step6502.arch.mos6502.cpu import Mos6502Cpu


# @intent:responsibility 加算結果とフラグをまとめて返す型。
class AddResult(NamedTuple):
    value: int
    c: bool
    z: bool
    v: bool
    n: bool


# --- Arithmetic Operations (ADC, SBC) ---

# @intent:responsibility 標準バイナリ加算ロジック。A + M + C を8bitに切り詰め、C, Z, V, N を導出する。
def add_with_carry(a: int, val: int, carry_in: bool) -> AddResult:
    res_wide = a + val + (1 if carry_in else 0)
    res = res_wide & 0xFF

    # V is set if the sign of the result differs from the sign of both operands.
    # ~(A ^ val) & (A ^ res) & 0x80
    v = (~(a ^ val) & (a ^ res) & 0x80) != 0
    return AddResult(res, res_wide > 0xFF, res == 0, v, (res & 0x80) != 0)


# @intent:responsibility A - M - (1 - C)。キャリーは「ボローなし」を意味する。
# @intent:note SBC A, M は ADC A, ~M と等価。
def subtract_with_borrow(a: int, val: int, carry_in: bool) -> AddResult:
    return add_with_carry(a, val ^ 0xFF, carry_in)


def _apply(cpu: 'Mos6502Cpu', result: AddResult) -> None:
    cpu.state.a = result.value
    cpu.state.flags.update(c=result.c, z=result.z, v=result.v, n=result.n)


def adc(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    val = read_operand(cpu, addr_res)
    _apply(cpu, add_with_carry(cpu.state.a, val, cpu.state.flags.c))


def sbc(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    val = read_operand(cpu, addr_res)
    _apply(cpu, subtract_with_borrow(cpu.state.a, val, cpu.state.flags.c))


# --- Increment (INC, INX, INY) ---

# @intent:responsibility メモリの値を1増やす（リードモディファイライト）。
# @intent:note read, modify, write の3サイクル + インデックス付きの場合は補正サイクル。
def inc(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    addr, _, page_fixup = addr_res
    if page_fixup:
        cpu.internal_cycle()
    val = cpu.read(addr)
    cpu.internal_cycle()  # modify
    res = (val + 1) & 0xFF
    cpu.write(addr, res)
    update_nz(cpu.state, res)


def inx(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    cpu.internal_cycle()
    res = (cpu.state.x + 1) & 0xFF
    cpu.state.x = res
    update_nz(cpu.state, res)


def iny(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    cpu.internal_cycle()
    res = (cpu.state.y + 1) & 0xFF
    cpu.state.y = res
    update_nz(cpu.state, res)
