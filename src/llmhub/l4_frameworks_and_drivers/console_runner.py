"""Console runner — line-oriented chat loop driving the ChatController."""

from __future__ import annotations

import asyncio
import contextlib
import signal
import sys
from collections.abc import Awaitable, Callable
from typing import TextIO

from llmhub.l1_entities.chat_message import Message, Suggestion
from llmhub.l1_entities.mode import Mode
from llmhub.l2_use_cases.ports.presenter import Notice
from llmhub.l3_interface_adapters.controllers.chat_controller import ChatController

HELP_TEXT = (
    'Commands: /mode kid|expert|inshort|none  /suggestions on|off  /quit\n'
    'Enter a suggestion number to send that suggestion.'
)


class ConsolePresenter:
    """Prints streamed assistant text incrementally, plus suggestions and notices."""

    def __init__(self, out: TextIO | None = None, err: TextIO | None = None) -> None:
        self._out = out or sys.stdout
        self._err = err or sys.stderr
        self._printed: dict[str, str] = {}
        self._streaming_line_open = False

    def message_updated(self, message: Message) -> None:
        if message.role != 'assistant':
            return
        shown = self._printed.get(message.id, '')
        if message.content.startswith(shown):
            self._out.write(message.content[len(shown) :])
        else:
            self._out.write(f'\n{message.content}')
        self._out.flush()
        self._printed[message.id] = message.content
        self._streaming_line_open = True

    def suggestions_updated(self, suggestions: list[Suggestion]) -> None:
        if not suggestions:
            return
        self._close_line()
        lines = '\n'.join(f'  [{i + 1}] {s.prompt}' for i, s in enumerate(suggestions))
        self._err.write(f'Suggestions:\n{lines}\n')
        self._err.flush()

    def notify(self, notice: Notice) -> None:
        self._close_line()
        self._err.write(f'[{notice.level}] {notice.text}\n')
        self._err.flush()

    def state_changed(self, state: str) -> None:
        if state == 'idle':
            self._close_line()

    def _close_line(self) -> None:
        if self._streaming_line_open:
            self._out.write('\n')
            self._out.flush()
            self._streaming_line_open = False


async def _read_stdin(prompt: str) -> str | None:
    def _read() -> str | None:
        try:
            return input(prompt)
        except EOFError:
            return None

    return await asyncio.to_thread(_read)


@contextlib.contextmanager
def _cancel_on_sigint(controller: ChatController):
    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, controller.cancel)
    except (NotImplementedError, RuntimeError):  # pragma: no cover -- Windows event loops
        yield
        return
    try:
        yield
    finally:
        loop.remove_signal_handler(signal.SIGINT)


def _handle_command(controller: ChatController, line: str, err: TextIO) -> bool:
    """Apply a slash command. Returns False when the loop should stop."""
    name, _, arg = line[1:].partition(' ')
    arg = arg.strip().lower()
    if name in {'quit', 'exit'}:
        return False
    if name == 'mode':
        try:
            controller.set_mode(Mode(arg or 'none'))
        except ValueError:
            err.write(f'Unknown mode: {arg}\n')
        else:
            err.write(f'Mode: {controller.mode.label or "default"}\n')
    elif name == 'suggestions' and arg in {'on', 'off'}:
        controller.suggestions_enabled = arg == 'on'
    else:
        err.write(f'{HELP_TEXT}\n')
    return True


async def run_console_chat(
    controller: ChatController,
    read_line: Callable[[str], Awaitable[str | None]] | None = None,
    err: TextIO | None = None,
) -> None:
    """Read lines until EOF or /quit, submitting each as a chat turn."""
    read = read_line or _read_stdin
    _err = err or sys.stderr
    while True:
        line = await read('> ')
        if line is None:
            break
        text = line.strip()
        if not text:
            continue
        if text.startswith('/'):
            if not _handle_command(controller, text, _err):
                break
            continue
        if text.isdigit() and 0 < int(text) <= len(controller.suggestions):
            text = controller.suggestions[int(text) - 1].prompt
            _err.write(f'> {text}\n')
        with _cancel_on_sigint(controller):
            await controller.submit_turn(text)
