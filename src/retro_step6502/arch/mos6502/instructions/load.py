# src/retro_step6502/arch/mos6502/instructions/load.py
"""
MOS 6502 転送系命令 (Load/Store)。
"""
from typing import TYPE_CHECKING

from retro_step6502.core.state import CpuState
from retro_step6502.arch.mos6502.instructions.base import AddressingResult

if TYPE_CHECKING:
    from retro_step6502.arch.mos6502.cpu import Mos6502Cpu


# @intent:responsibility フラグ更新ヘルパー (N, Z)
def update_nz(state: CpuState, value: int) -> None:
    state.flags.update(n=(value & 0x80) != 0, z=(value == 0))


# @intent:responsibility Immediate ならその値を、それ以外は実効アドレスから1バイト読む（1サイクル）。
def read_operand(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> int:
    addr, val, _ = addr_res
    if val is None:  # Not Immediate
        val = cpu.read(addr)
    return val


# --- LDA (Load Accumulator) ---
# @intent:responsibility メモリからAレジスタへロードし、N, Zフラグを更新。
def lda(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    val = read_operand(cpu, addr_res)
    cpu.state.a = val
    update_nz(cpu.state, val)


# --- LDX (Load X Register) ---
def ldx(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    val = read_operand(cpu, addr_res)
    cpu.state.x = val
    update_nz(cpu.state, val)


# --- LDY (Load Y Register) ---
def ldy(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    val = read_operand(cpu, addr_res)
    cpu.state.y = val
    update_nz(cpu.state, val)


# @intent:responsibility ストア共通処理。フラグ変化なし。
# @intent:note インデックス付きモードでは、書き込み前に上位バイト補正サイクルを常に1つ消費する。
def _store(cpu: 'Mos6502Cpu', addr_res: AddressingResult, value: int) -> None:
    addr, _, page_fixup = addr_res
    if page_fixup:
        cpu.internal_cycle()
    cpu.write(addr, value)


# --- STA (Store Accumulator) ---
def sta(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    _store(cpu, addr_res, cpu.state.a)


# --- STX (Store X Register) ---
def stx(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    _store(cpu, addr_res, cpu.state.x)


# --- STY (Store Y Register) ---
def sty(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    _store(cpu, addr_res, cpu.state.y)
