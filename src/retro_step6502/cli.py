"""
コマンドラインのエントリポイント。

プログラムイメージを読み込んで実行し、終了時にレジスタのレポートを表示します。
--debug を指定するとシングルステップのデバッグコンソールを起動します。
"""
import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from retro_step6502 import __version__
from retro_step6502.common.formatting import format_report, hex_dump
from retro_step6502.config.builder import SystemBuilder
from retro_step6502.config.loader import ConfigLoader
from retro_step6502.config.models import EmulatorConfig, PROGRAM_FORMATS
from retro_step6502.core.errors import EmulatorError
from retro_step6502.core.snapshot import HaltReason
from retro_step6502.debugger.console import DebugConsole
from retro_step6502.debugger.debugger import Debugger, parse_address

logger = logging.getLogger("retro_step6502")


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="retro-step6502",
        description="Instruction-level MOS 6502 emulator with a single-step debugger")
    parser.add_argument("image", nargs="?", help="Program image to load")
    parser.add_argument("--program", "-p", help="Program image to load (same as the positional argument)")
    parser.add_argument("--debug", "-d", action="store_true", help="Start the single-step debug console")
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument("--format", "-f", choices=PROGRAM_FORMATS, help="Program image format")
    parser.add_argument("--max-instructions", type=int, help="Stop after this many instructions")
    parser.add_argument("--dump", nargs=2, metavar=("START", "END"),
                        help="Hex dump a memory range (hex addresses) after the run")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], help="Logging level")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


# @intent:responsibility 設定ファイルとコマンドライン引数を1つの EmulatorConfig にまとめる。
def build_config(args: argparse.Namespace) -> EmulatorConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else EmulatorConfig()
    overrides = {}
    program = args.program or args.image
    if program:
        overrides["program"] = program
    if args.format:
        overrides["format"] = args.format
    if args.debug:
        overrides["debug"] = True
    if args.max_instructions is not None:
        overrides["max_instructions"] = args.max_instructions
    return replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    parser = get_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level),
                        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    try:
        config = build_config(args)
    except EmulatorError as e:
        parser.error(str(e))
    if config.program is None:
        parser.error("a program image is required (positional IMAGE or --program)")

    dump_range = None
    if args.dump:
        try:
            dump_range = [parse_address(a) for a in args.dump]
        except EmulatorError as e:
            parser.error(str(e))
        if dump_range[0] > dump_range[1]:
            parser.error("--dump START must not be greater than END")

    try:
        cpu = SystemBuilder().build_system(config)
    except EmulatorError as e:
        logger.error("%s", e)
        return 1

    if config.debug:
        result = DebugConsole(Debugger(cpu, max_instructions=config.max_instructions)).run()
    else:
        result = cpu.run(max_instructions=config.max_instructions)

    if result.reason == HaltReason.UNRECOGNIZED_OPCODE:
        print(f"Failed to decode instruction: ${result.opcode:02X} @ ${result.address:04X}")
    print(f"Halted: {result.reason.value} after {result.instructions_executed} instructions, "
          f"{result.total_cycles} cycles")
    print(format_report(result.state))

    if dump_range:
        for line in hex_dump(cpu.memory, dump_range[0], dump_range[1]):
            print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
