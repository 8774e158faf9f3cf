# tests/arch/mos6502/test_disassembler.py
"""
逆アセンブラと副作用のないデコードの単体テスト。
"""
from retro_step6502.arch.mos6502.disassembler import disassemble
from retro_step6502.arch.mos6502.instructions import decode_opcode
from retro_step6502.transport.memory import Memory

# @intent:test_suite メモリ範囲の逆アセンブル結果の検証。


def test_disassemble_program():
    memory = Memory()
    # LDX #$05 ; STA $0400,X ; JSR $0221 ; BRK
    memory.load(0x0200, [0xA2, 0x05, 0x9D, 0x00, 0x04, 0x20, 0x21, 0x02, 0x00])

    lines = disassemble(memory, 0x0200, 9)

    assert lines == [
        (0x0200, "A2 05", "LDX #$05"),
        (0x0202, "9D 00 04", "STA $0400,X"),
        (0x0205, "20 21 02", "JSR $0221"),
        (0x0208, "00", "BRK"),
    ]


def test_unknown_bytes_are_data():
    memory = Memory()
    memory.load(0x0300, [0xFF, 0x02, 0xE8])

    lines = disassemble(memory, 0x0300, 3)

    assert lines == [
        (0x0300, "FF", "DB $FF"),
        (0x0301, "02", "DB $02"),
        (0x0302, "E8", "INX"),
    ]


# @intent:test_case_no_side_effect デコードがメモリ内容以外を参照しないことを検証します。
def test_decode_opcode_reads_operands():
    memory = Memory()
    memory.load(0x0200, [0xB1, 0x40])

    operation = decode_opcode(memory, 0x0200)

    assert operation.mnemonic == "LDA"
    assert operation.operands == ["($40),Y"]
    assert operation.operand_bytes == [0x40]
    assert operation.cycle_count == 5
    assert operation.length == 2
    assert operation.render() == "$0200: B1 40     LDA ($40),Y"
