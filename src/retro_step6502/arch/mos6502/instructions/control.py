# src/retro_step6502/arch/mos6502/instructions/control.py
"""
MOS 6502 制御系命令 (Subroutine, Flags)。
"""
from typing import TYPE_CHECKING

from retro_step6502.arch.mos6502.instructions.base import AddressingResult

if TYPE_CHECKING:
    from retro_step6502.arch.mos6502.cpu import Mos6502Cpu


# --- Subroutine Instructions ---

# @intent:responsibility 戻りアドレスをスタックに積み、サブルーチンへジャンプする。
# @intent:note オペランド取得後のPCは次の命令を指している。スタックに積むのは
#              「JSR命令の最後のバイトのアドレス」、すなわち PC - 1。
#
#   Cycle 1    Fetch Opcode
#   Cycle 2    Fetch ADL
#   Cycle 3    Fetch ADH
#   Cycle 4    Internal (SP)
#   Cycle 5    Push PCL
#   Cycle 6    Push PCH
def jsr(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    target, _, _ = addr_res
    ret_addr = (cpu.state.pc - 1) & 0xFFFF
    cpu.internal_cycle()
    cpu.push_word(ret_addr)
    cpu.state.pc = target


# @intent:responsibility スタックから戻りアドレスを取り出し、その次の命令から再開する。
#
#   Cycle 1    Fetch Opcode
#   Cycle 2    Internal (read next byte, discarded)
#   Cycle 3    Internal (SP)
#   Cycle 4    Pop PCH
#   Cycle 5    Pop PCL
#   Cycle 6    PC -> PC + 1
def rts(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    cpu.internal_cycle()
    cpu.internal_cycle()
    ret_addr = cpu.pop_word()
    cpu.internal_cycle()
    # Return address pulled is "last byte of JSR". So we need to add 1 to get next opcode.
    cpu.state.pc = (ret_addr + 1) & 0xFFFF


# --- Flag Operations (CLC, SEC) ---

def clc(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    cpu.internal_cycle()
    cpu.state.flags.update(c=False)


def sec(cpu: 'Mos6502Cpu', addr_res: AddressingResult) -> None:
    cpu.internal_cycle()
    cpu.state.flags.update(c=True)
