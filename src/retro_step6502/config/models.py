from dataclasses import dataclass
from typing import Optional

from retro_step6502.transport.memory import DEFAULT_LOAD_ADDRESS

PROGRAM_FORMATS = ("binary", "ihex")


@dataclass
class EmulatorConfig:
    program: Optional[str] = None
    format: str = "binary"  # "binary", "ihex"
    load_address: int = DEFAULT_LOAD_ADDRESS
    stack_pointer: int = 0xFF
    debug: bool = False
    max_instructions: Optional[int] = None
