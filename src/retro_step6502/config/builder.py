from retro_step6502.arch.mos6502.cpu import Mos6502Cpu
from retro_step6502.core.errors import ConfigError
from retro_step6502.loader.loader import BinaryLoader, IntelHexLoader
from .models import EmulatorConfig


# @intent:responsibility 構成（Config）に基づいて CPU とメモリを生成し、プログラムをロードします。
class SystemBuilder:
    def build_system(self, config: EmulatorConfig) -> Mos6502Cpu:
        cpu = Mos6502Cpu(load_address=config.load_address, stack_pointer=config.stack_pointer)

        if config.program is None:
            raise ConfigError("No program image specified")

        if config.format == "ihex":
            IntelHexLoader().load_intel_hex(config.program, cpu.memory)
        else:
            BinaryLoader().load_binary(config.program, cpu.memory, config.load_address)

        return cpu
