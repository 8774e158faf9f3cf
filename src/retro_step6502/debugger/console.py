# retro_step6502/debugger/console.py
"""
デバッガのテキストREPL。

Debugger の要求/応答を1行単位の入出力に結びつけます。入出力関数は差し替え可能で、
テストではスクリプト化された入力で実行できます。
"""
from typing import Callable, Optional

from retro_step6502.core.errors import MalformedDebugCommandError
from retro_step6502.core.snapshot import RunResult
from retro_step6502.debugger.debugger import Debugger

InputFunc = Callable[[str], str]
OutputFunc = Callable[[str], None]


# @intent:responsibility 一時停止ごとに状態を表示し、再開されるまで入力を受け付ける。
class DebugConsole:
    def __init__(self, debugger: Debugger, input_func: Optional[InputFunc] = None,
                 output_func: Optional[OutputFunc] = None, prompt: str = "> "):
        self._debugger = debugger
        self._input = input_func or input
        self._output = output_func or print
        self._prompt = prompt

    # @intent:responsibility ディスパッチャが停止するまで対話を続け、その結果を返す。
    def run(self) -> RunResult:
        while True:
            outcome = self._debugger.next_pause()
            if isinstance(outcome, RunResult):
                return outcome

            for line in outcome.render():
                self._output(line)
            self._prompt_until_resumed()

    def _prompt_until_resumed(self) -> None:
        while True:
            try:
                line = self._input(self._prompt)
            except EOFError:
                # 入力が尽きた場合は exit と同じ扱い
                line = "exit"

            try:
                response = self._debugger.submit(line)
            except MalformedDebugCommandError as e:
                self._output(f"{e} (type 'help' for commands)")
                continue

            for text in response.output:
                self._output(text)
            if response.resumed:
                return
