"""
レジスタ状態とメモリ内容をテキストとして整形するヘルパー。
デバッグコンソールと終了時レポートで共通して使用されます。
"""
from typing import List

from retro_step6502.core.state import CpuState
from retro_step6502.transport.memory import Memory

BYTES_PER_LINE = 16


# @intent:responsibility 1行のレジスタ・フラグ表示を返す（デバッグコンソール用）。
def format_state_line(state: CpuState) -> str:
    return (f"A=${state.a:02X} X=${state.x:02X} Y=${state.y:02X} "
            f"PC=${state.pc:04X} SP=${state.sp:02X} "
            f"CZIDBVN={state.flags.to_bit_string()} CYC={state.cycles_remaining}")


# @intent:responsibility 実行終了時のレジスタレポートを返す。フラグは C Z I D B V N の順の7文字。
def format_report(state: CpuState) -> str:
    return "\n".join([
        f"A:  ${state.a:02X} ({state.a})",
        f"X:  ${state.x:02X} ({state.x})",
        f"Y:  ${state.y:02X} ({state.y})",
        f"PC: ${state.pc:04X}",
        f"SP: ${state.sp:02X}",
        f"P:  {state.flags.to_bit_string()} (CZIDBVN)",
    ])


# @intent:responsibility メモリ範囲 [start, end] を16バイト単位の16進ダンプにする。
def hex_dump(memory: Memory, start: int, end: int) -> List[str]:
    """
    "0100: 00 01 02 ..." 形式の行リストを返します。
    """
    data = memory.read_range(start, end)
    lines = []
    for offset in range(0, len(data), BYTES_PER_LINE):
        chunk = data[offset:offset + BYTES_PER_LINE]
        line_addr = (start + offset) & 0xFFFF
        lines.append(f"{line_addr:04X}: " + " ".join(f"{b:02X}" for b in chunk))
    return lines
