# src/retro_step6502/arch/mos6502/instructions/__init__.py
from .maps import OPCODE_MAP, BREAK_OPCODE, OpcodeEntry, decode_opcode
