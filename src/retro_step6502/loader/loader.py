# retro_step6502/loader/loader.py
"""
プログラムローダーモジュール。
ヘッダなしの生バイナリと Intel HEX 形式のロードをサポートします。
"""
import logging
from pathlib import Path
from typing import Union

from retro_step6502.core.errors import ProgramLoadError
from retro_step6502.transport.memory import DEFAULT_LOAD_ADDRESS, MEMORY_SIZE, Memory

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class BinaryLoader:
    """
    生のバイナリイメージを、指定アドレスからそのままメモリへコピーするローダー。
    """
    # @intent:responsibility バイト列をロードし、書き込んだバイト数を返す。
    # @intent:pre-condition イメージは $FFFF を越えてはならない。
    def load_bytes(self, data: bytes, memory: Memory, address: int = DEFAULT_LOAD_ADDRESS) -> int:
        if address + len(data) > MEMORY_SIZE:
            raise ProgramLoadError(
                f"Program of {len(data)} bytes does not fit at ${address:04X} (ends past $FFFF)")
        count = memory.load(address, data)
        logger.info("Loaded %d bytes at $%04X", count, address)
        return count

    def load_binary(self, file_path: PathLike, memory: Memory, address: int = DEFAULT_LOAD_ADDRESS) -> int:
        try:
            data = Path(file_path).read_bytes()
        except OSError as e:
            raise ProgramLoadError(f"Cannot read program image {file_path}: {e}") from e
        return self.load_bytes(data, memory, address)


class IntelHexLoader:
    """
    Intel HEX形式のファイルを解析し、データをメモリにロードするローダー。
    データレコード (00) のアドレスがそのままロード先になる。
    """
    def load_intel_hex(self, file_path: PathLike, memory: Memory) -> int:
        try:
            with open(file_path, 'r') as f:
                return self.load_lines(f, memory)
        except OSError as e:
            raise ProgramLoadError(f"Cannot read Intel HEX file {file_path}: {e}") from e

    # @intent:responsibility レコード行を順に解析してメモリへ書き込み、書き込んだバイト数を返す。
    def load_lines(self, lines, memory: Memory) -> int:
        current_extended_address = 0x0000
        total = 0

        for line_num, line in enumerate(lines, 1):
            line = line.strip()
            if not line or not line.startswith(':'):
                continue

            comment_start = line.find(';')
            if comment_start != -1:
                line = line[:comment_start].strip()

            if len(line) < 11:
                raise ProgramLoadError(f"Invalid Intel HEX record format on line {line_num}: Too short - {line}")

            try:
                data_length = int(line[1:3], 16)
                address_field = int(line[3:7], 16)
                record_type = int(line[7:9], 16)
                data_part_str = line[9:-2]
                checksum_field = int(line[-2:], 16)
                data = bytes.fromhex(data_part_str)
            except ValueError as e:
                raise ProgramLoadError(f"Error parsing Intel HEX line {line_num}: {line} - {e}") from e

            if len(data) != data_length:
                raise ProgramLoadError(f"Data length mismatch on line {line_num}")

            checksum_sum = data_length + (address_field >> 8) + (address_field & 0xFF) + record_type + sum(data)
            calculated_checksum = (~checksum_sum + 1) & 0xFF
            if calculated_checksum != checksum_field:
                raise ProgramLoadError(
                    f"Checksum mismatch on line {line_num}: "
                    f"Calculated {calculated_checksum:02X}, Expected {checksum_field:02X}")

            if record_type == 0x00:
                load_address = current_extended_address + address_field
                if load_address + data_length > MEMORY_SIZE:
                    raise ProgramLoadError(f"Record on line {line_num} extends past $FFFF")
                total += memory.load(load_address, data)
            elif record_type == 0x01:
                break
            elif record_type == 0x04:
                current_extended_address = int(data_part_str, 16) << 16
            elif record_type == 0x02:
                current_extended_address = int(data_part_str, 16) << 4
            elif record_type in (0x03, 0x05):
                pass
            else:
                raise ProgramLoadError(f"Unknown Intel HEX record type {record_type:02X} on line {line_num}")

        logger.info("Loaded %d bytes from Intel HEX", total)
        return total
