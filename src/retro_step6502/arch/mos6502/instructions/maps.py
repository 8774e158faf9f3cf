# src/retro_step6502/arch/mos6502/instructions/maps.py
"""
MOS 6502 命令マップとデコードロジック。

オペコード -> (ニーモニック, アドレッシングモード, 実行関数, 総サイクル数) の表で
命令を定義する。命令を追加する場合はこの表にエントリを足すだけでよい。
"""
from typing import TYPE_CHECKING, Callable, Dict, NamedTuple

from retro_step6502.core.snapshot import Operation
from retro_step6502.transport.memory import Memory
from retro_step6502.arch.mos6502.instructions import base, load, alu, control

if TYPE_CHECKING:
    from retro_step6502.arch.mos6502.cpu import Mos6502Cpu

# Execution Function Type
ExecFunc = Callable[['Mos6502Cpu', base.AddressingResult], None]

# 終了オペコード。実行されず、実行ループを停止させる。
BREAK_OPCODE = 0x00


# Opcode Entry: (Mnemonic, Addressing Mode, Execution Function, Total Cycles)
class OpcodeEntry(NamedTuple):
    mnemonic: str
    mode: base.AddressingMode
    execute: ExecFunc
    cycles: int


OPCODE_MAP: Dict[int, OpcodeEntry] = {
    # --- Load/Store ---
    0xA9: OpcodeEntry("LDA", base.IMMEDIATE, load.lda, 2),
    0xA5: OpcodeEntry("LDA", base.ZEROPAGE, load.lda, 3),
    0xB5: OpcodeEntry("LDA", base.ZEROPAGE_X, load.lda, 4),
    0xAD: OpcodeEntry("LDA", base.ABSOLUTE, load.lda, 4),
    0xBD: OpcodeEntry("LDA", base.ABSOLUTE_X, load.lda, 4),
    0xB9: OpcodeEntry("LDA", base.ABSOLUTE_Y, load.lda, 4),
    0xA1: OpcodeEntry("LDA", base.INDEXED_INDIRECT, load.lda, 6),
    0xB1: OpcodeEntry("LDA", base.INDIRECT_INDEXED, load.lda, 5),

    0xA2: OpcodeEntry("LDX", base.IMMEDIATE, load.ldx, 2),
    0xA6: OpcodeEntry("LDX", base.ZEROPAGE, load.ldx, 3),
    0xB6: OpcodeEntry("LDX", base.ZEROPAGE_Y, load.ldx, 4),
    0xAE: OpcodeEntry("LDX", base.ABSOLUTE, load.ldx, 4),
    0xBE: OpcodeEntry("LDX", base.ABSOLUTE_Y, load.ldx, 4),

    0xA0: OpcodeEntry("LDY", base.IMMEDIATE, load.ldy, 2),
    0xA4: OpcodeEntry("LDY", base.ZEROPAGE, load.ldy, 3),
    0xB4: OpcodeEntry("LDY", base.ZEROPAGE_X, load.ldy, 4),
    0xAC: OpcodeEntry("LDY", base.ABSOLUTE, load.ldy, 4),
    0xBC: OpcodeEntry("LDY", base.ABSOLUTE_X, load.ldy, 4),

    0x85: OpcodeEntry("STA", base.ZEROPAGE, load.sta, 3),
    0x95: OpcodeEntry("STA", base.ZEROPAGE_X, load.sta, 4),
    0x8D: OpcodeEntry("STA", base.ABSOLUTE, load.sta, 4),
    0x9D: OpcodeEntry("STA", base.ABSOLUTE_X, load.sta, 5),
    0x99: OpcodeEntry("STA", base.ABSOLUTE_Y, load.sta, 5),
    0x81: OpcodeEntry("STA", base.INDEXED_INDIRECT, load.sta, 6),
    0x91: OpcodeEntry("STA", base.INDIRECT_INDEXED, load.sta, 6),

    0x86: OpcodeEntry("STX", base.ZEROPAGE, load.stx, 3),
    0x96: OpcodeEntry("STX", base.ZEROPAGE_Y, load.stx, 4),
    0x8E: OpcodeEntry("STX", base.ABSOLUTE, load.stx, 4),

    0x84: OpcodeEntry("STY", base.ZEROPAGE, load.sty, 3),
    0x94: OpcodeEntry("STY", base.ZEROPAGE_X, load.sty, 4),
    0x8C: OpcodeEntry("STY", base.ABSOLUTE, load.sty, 4),

    # --- ALU Operations ---
    # ADC
    0x69: OpcodeEntry("ADC", base.IMMEDIATE, alu.adc, 2),
    0x65: OpcodeEntry("ADC", base.ZEROPAGE, alu.adc, 3),
    0x75: OpcodeEntry("ADC", base.ZEROPAGE_X, alu.adc, 4),
    0x6D: OpcodeEntry("ADC", base.ABSOLUTE, alu.adc, 4),
    0x7D: OpcodeEntry("ADC", base.ABSOLUTE_X, alu.adc, 4),
    0x79: OpcodeEntry("ADC", base.ABSOLUTE_Y, alu.adc, 4),
    0x61: OpcodeEntry("ADC", base.INDEXED_INDIRECT, alu.adc, 6),
    0x71: OpcodeEntry("ADC", base.INDIRECT_INDEXED, alu.adc, 5),

    # SBC
    0xE9: OpcodeEntry("SBC", base.IMMEDIATE, alu.sbc, 2),
    0xE5: OpcodeEntry("SBC", base.ZEROPAGE, alu.sbc, 3),
    0xF5: OpcodeEntry("SBC", base.ZEROPAGE_X, alu.sbc, 4),
    0xED: OpcodeEntry("SBC", base.ABSOLUTE, alu.sbc, 4),
    0xFD: OpcodeEntry("SBC", base.ABSOLUTE_X, alu.sbc, 4),
    0xF9: OpcodeEntry("SBC", base.ABSOLUTE_Y, alu.sbc, 4),
    0xE1: OpcodeEntry("SBC", base.INDEXED_INDIRECT, alu.sbc, 6),
    0xF1: OpcodeEntry("SBC", base.INDIRECT_INDEXED, alu.sbc, 5),

    # INC
    0xE6: OpcodeEntry("INC", base.ZEROPAGE, alu.inc, 5),
    0xF6: OpcodeEntry("INC", base.ZEROPAGE_X, alu.inc, 6),
    0xEE: OpcodeEntry("INC", base.ABSOLUTE, alu.inc, 6),
    0xFE: OpcodeEntry("INC", base.ABSOLUTE_X, alu.inc, 7),

    0xE8: OpcodeEntry("INX", base.IMPLIED, alu.inx, 2),
    0xC8: OpcodeEntry("INY", base.IMPLIED, alu.iny, 2),

    # --- Control Instructions ---
    0x20: OpcodeEntry("JSR", base.ABSOLUTE, control.jsr, 6),
    0x60: OpcodeEntry("RTS", base.IMPLIED, control.rts, 6),

    # Flags
    0x18: OpcodeEntry("CLC", base.IMPLIED, control.clc, 2),
    0x38: OpcodeEntry("SEC", base.IMPLIED, control.sec, 2),
}


# @intent:responsibility 指定アドレスの命令を副作用なしでデコードする。
# @intent:note メモリを直接参照するため、サイクルもPCも変化しない。デバッガ・逆アセンブラ用。
def decode_opcode(memory: Memory, address: int) -> Operation:
    address &= 0xFFFF
    opcode = memory.read(address)
    if opcode == BREAK_OPCODE:
        return Operation(address, opcode, "BRK", [], [], 7, 1)

    entry = OPCODE_MAP.get(opcode)
    if not entry:
        return Operation(address, opcode, "???", [], [], 0, 1)

    op_bytes = [memory.read(address + 1 + i) for i in range(entry.mode.operand_length)]
    op_str = entry.mode.format_operand(op_bytes)

    return Operation(
        address=address,
        opcode=opcode,
        mnemonic=entry.mnemonic,
        operands=[op_str] if op_str else [],
        operand_bytes=op_bytes,
        cycle_count=entry.cycles,
        length=1 + len(op_bytes),
    )
