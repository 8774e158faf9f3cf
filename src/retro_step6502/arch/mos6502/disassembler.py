# src/retro_step6502/arch/mos6502/disassembler.py
"""
MOS 6502 逆アセンブラ。
"""
from typing import List, Tuple

from retro_step6502.transport.memory import Memory
from retro_step6502.arch.mos6502.instructions.maps import decode_opcode


# @intent:responsibility 指定されたメモリ範囲を逆アセンブルする。
def disassemble(memory: Memory, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
    """
    メモリを解析し、(アドレス, HEX, ニーモニック) のリストを返す。
    未対応のバイトは "DB $xx" として1バイトずつ出力する。
    """
    results = []
    current_addr = start_addr
    end_addr = start_addr + length

    while current_addr < end_addr:
        operation = decode_opcode(memory, current_addr)
        addr = operation.address

        if operation.mnemonic == "???":
            results.append((addr, operation.opcode_hex, f"DB ${operation.opcode:02X}"))
            current_addr += 1
            continue

        hex_str = " ".join(f"{b:02X}" for b in [operation.opcode] + operation.operand_bytes)
        mnemonic_full = f"{operation.mnemonic} {' '.join(operation.operands)}".strip()

        results.append((addr, hex_str, mnemonic_full))
        current_addr += operation.length

    return results
