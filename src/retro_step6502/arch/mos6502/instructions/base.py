# src/retro_step6502/arch/mos6502/instructions/base.py
"""
MOS 6502 アドレッシングモード解決ロジック。

各モードは「命令ストリームからのオペランド取得」と「実効アドレスの計算」を行い、
その過程で発生したバスアクセス・内部サイクルを CPU のサイクルカウンタから消費する。
"""
from typing import TYPE_CHECKING, Callable, List, NamedTuple, Optional

if TYPE_CHECKING:
    from retro_step6502.arch.mos6502.cpu import Mos6502Cpu


# @intent:responsibility アドレッシングモードの解決結果を返す型。
# address: 解決された実効アドレス (Immediate / Implied の場合は None)
# value: Immediate の場合の値、それ以外は None
# page_fixup: インデックス加算後の上位バイト補正サイクルを持つモードか (abs,X / abs,Y / (ind),Y)
#             読み出し命令はこのサイクルを払わない（ページ境界ペナルティは非対応）。
#             書き込み・リードモディファイライト命令は常に1サイクル払う。
class AddressingResult(NamedTuple):
    address: Optional[int]
    value: Optional[int]
    page_fixup: bool = False


ResolveFunc = Callable[['Mos6502Cpu'], AddressingResult]


# @intent:responsibility モード名、オペランド長、解決関数、逆アセンブル用の書式をまとめる。
class AddressingMode(NamedTuple):
    name: str
    operand_length: int
    resolve: ResolveFunc
    template: str  # オペランド文字列の書式。{0} は8bit、{1} は16bitの値

    # @intent:responsibility オペランドバイト列から逆アセンブル用の文字列を生成する。
    def format_operand(self, operand_bytes: List[int]) -> str:
        if self.operand_length == 0:
            return ""
        lo = operand_bytes[0]
        word = lo | (operand_bytes[1] << 8) if self.operand_length == 2 else lo
        return self.template.format(lo, word)


# --- Resolvers ---

# @intent:responsibility Implied Mode
def addr_implied(cpu: 'Mos6502Cpu') -> AddressingResult:
    return AddressingResult(None, None)


# @intent:responsibility Immediate Mode (#$xx)
def addr_immediate(cpu: 'Mos6502Cpu') -> AddressingResult:
    return AddressingResult(None, cpu.fetch_operand())


# @intent:responsibility Zero Page Mode ($xx)
def addr_zeropage(cpu: 'Mos6502Cpu') -> AddressingResult:
    return AddressingResult(cpu.fetch_operand(), None)


# @intent:responsibility Zero Page, X Mode ($xx,X)
# @intent:note ラップアラウンドなし。$80 + $FF は $017F を指す（実機は $007F）。
def addr_zeropage_x(cpu: 'Mos6502Cpu') -> AddressingResult:
    base = cpu.fetch_operand()
    cpu.internal_cycle()  # index add
    return AddressingResult(base + cpu.state.x, None)


# @intent:responsibility Zero Page, Y Mode ($xx,Y) - LDX, STX only
# @intent:note Zero Page, X と同じくラップアラウンドなし。
def addr_zeropage_y(cpu: 'Mos6502Cpu') -> AddressingResult:
    base = cpu.fetch_operand()
    cpu.internal_cycle()
    return AddressingResult(base + cpu.state.y, None)


# @intent:responsibility 命令ストリームから下位・上位の順に2バイト読み、16bitアドレスを組み立てる。
def _fetch_word(cpu: 'Mos6502Cpu') -> int:
    lo = cpu.fetch_operand()
    hi = cpu.fetch_operand()
    return (hi << 8) | lo


# @intent:responsibility Absolute Mode ($xxxx)
def addr_absolute(cpu: 'Mos6502Cpu') -> AddressingResult:
    return AddressingResult(_fetch_word(cpu), None)


# @intent:responsibility Absolute, X Mode ($xxxx,X)
def addr_absolute_x(cpu: 'Mos6502Cpu') -> AddressingResult:
    base_addr = _fetch_word(cpu)
    return AddressingResult((base_addr + cpu.state.x) & 0xFFFF, None, True)


# @intent:responsibility Absolute, Y Mode ($xxxx,Y)
def addr_absolute_y(cpu: 'Mos6502Cpu') -> AddressingResult:
    base_addr = _fetch_word(cpu)
    return AddressingResult((base_addr + cpu.state.y) & 0xFFFF, None, True)


# @intent:responsibility Indexed Indirect Mode ($xx,X) - "Pre-indexed"
# @intent:note ポインタはゼロページ内に置かれるため、ポインタアドレスは8bitで折り返す。
def addr_indexed_indirect(cpu: 'Mos6502Cpu') -> AddressingResult:
    base = cpu.fetch_operand()
    cpu.internal_cycle()
    ptr_addr = (base + cpu.state.x) & 0xFF

    lo = cpu.read(ptr_addr)
    hi = cpu.read((ptr_addr + 1) & 0xFF)
    return AddressingResult((hi << 8) | lo, None)


# @intent:responsibility Indirect Indexed Mode ($xx),Y - "Post-indexed"
# @intent:note ゼロページのポインタを読み、ベースアドレスを得てからYを加算。
def addr_indirect_indexed(cpu: 'Mos6502Cpu') -> AddressingResult:
    ptr_addr = cpu.fetch_operand()

    lo = cpu.read(ptr_addr)
    hi = cpu.read((ptr_addr + 1) & 0xFF)
    base_addr = (hi << 8) | lo
    return AddressingResult((base_addr + cpu.state.y) & 0xFFFF, None, True)


# --- Mode definitions ---

IMPLIED = AddressingMode("implied", 0, addr_implied, "")
IMMEDIATE = AddressingMode("immediate", 1, addr_immediate, "#${0:02X}")
ZEROPAGE = AddressingMode("zeropage", 1, addr_zeropage, "${0:02X}")
ZEROPAGE_X = AddressingMode("zeropage,x", 1, addr_zeropage_x, "${0:02X},X")
ZEROPAGE_Y = AddressingMode("zeropage,y", 1, addr_zeropage_y, "${0:02X},Y")
ABSOLUTE = AddressingMode("absolute", 2, addr_absolute, "${1:04X}")
ABSOLUTE_X = AddressingMode("absolute,x", 2, addr_absolute_x, "${1:04X},X")
ABSOLUTE_Y = AddressingMode("absolute,y", 2, addr_absolute_y, "${1:04X},Y")
INDEXED_INDIRECT = AddressingMode("(indirect,x)", 1, addr_indexed_indirect, "(${0:02X},X)")
INDIRECT_INDEXED = AddressingMode("(indirect),y", 1, addr_indirect_indexed, "(${0:02X}),Y")
