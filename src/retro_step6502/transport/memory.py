# retro_step6502/transport/memory.py
"""
Transport Layer (フラットメモリ)

このモジュールは、6502の64KBアドレス空間全体を1つのバイト列として保持し、
読み書きアクセスを提供する責務を負います。
"""
from typing import Iterable

# 64KBのアドレス空間
MEMORY_SIZE = 0x10000
ADDRESS_MASK = 0xFFFF

# アドレス空間の慣習的な区分
STACK_PAGE_START = 0x0100
STACK_PAGE_END = 0x01FF

# プログラムイメージのロード先
DEFAULT_LOAD_ADDRESS = 0x0200


# @intent:responsibility 64KBのフラットなメモリ領域を提供します。
# @intent:rationale アドレスは常に16bitに丸められるため、アクセスは全アドレス領域で失敗しません。
class Memory:
    """
    6502のアドレス空間全体をゼロ初期化されたbytearrayとして保持するメモリ。
    CPUインスタンスが排他的に所有します。
    """
    def __init__(self):
        self._memory = bytearray(MEMORY_SIZE)

    # @intent:responsibility 指定されたアドレスから8bitのデータを読み出します。
    # @intent:note 8bitアドレスはそのままゼロページを指します。
    def read(self, address: int) -> int:
        return self._memory[address & ADDRESS_MASK]

    # @intent:responsibility 指定されたアドレスに8bitのデータを書き込みます。
    # @intent:pre-condition データは8bit値である必要があります。アドレスは16bitを超えた分が切り捨てられます。
    def write(self, address: int, data: int) -> None:
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._memory[address & ADDRESS_MASK] = data

    # @intent:responsibility 診断用に範囲 [start, end] を読み出します（両端を含む）。
    def read_range(self, start: int, end: int) -> bytes:
        """
        startからendまで（endを含む）のバイト列を返します。
        範囲が$FFFFを越える場合は$0000へ折り返します。
        """
        if end < start:
            raise ValueError(f"Invalid range: start {start:#06x} is greater than end {end:#06x}.")
        return bytes(self._memory[(start + offset) & ADDRESS_MASK] for offset in range(end - start + 1))

    # @intent:responsibility バイト列を指定アドレスから連続して書き込みます（ローダー用）。
    def load(self, address: int, data: Iterable[int]) -> int:
        """
        dataをaddressから順に書き込み、書き込んだバイト数を返します。
        """
        count = 0
        for offset, value in enumerate(data):
            self.write(address + offset, value)
            count += 1
        return count
