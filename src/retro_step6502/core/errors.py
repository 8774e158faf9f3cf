# retro_step6502/core/errors.py
"""
エミュレータ全体で使用する例外の定義。
"""


class EmulatorError(Exception):
    """エミュレータ固有の例外の基底クラス。"""


# @intent:responsibility フェッチしたバイトに対応するハンドラが存在しないことを表します。
class UnrecognizedOpcodeError(EmulatorError):
    """
    未対応のオペコードをフェッチした。
    実行はそこで停止し、それまでの副作用は巻き戻されません。
    """
    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"Failed to decode instruction: ${opcode:02X} @ ${address:04X}")


# @intent:responsibility BRK（終了オペコード）に到達したことを表します。
class ProgramHalted(EmulatorError):
    def __init__(self, address: int):
        self.address = address
        super().__init__(f"BRK reached @ ${address:04X}")


# @intent:responsibility デバッグコンソールに入力された不正なコマンドを表します。状態は変更されません。
class MalformedDebugCommandError(EmulatorError, ValueError):
    pass


class ConfigError(EmulatorError, ValueError):
    pass


class ProgramLoadError(EmulatorError, ValueError):
    pass
