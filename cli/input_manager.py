"""Interactive line input with single/double Ctrl-C handling."""

from __future__ import annotations
import asyncio
import enum
import signal
import sys
import threading
import time
from typing import Callable, TextIO

CLEAR_LINE = "\r\033[K"
DEFAULT_PROMPT = "\033[94mYou\033[0m: "


class InputEvent(enum.Enum):
    CLEAR = "clear"
    EXIT = "exit"


class InputState(enum.Enum):
    IDLE = "idle"
    CLEARING = "clearing"
    EXITING = "exiting"


class InterruptClassifier:
    """Turns interrupt timestamps into clear/exit events.

    An interrupt arriving within ``window`` seconds of the previous single
    interrupt is an exit; anything else is a clear and becomes the new
    reference point.
    """

    def __init__(self, window: float = 2.0):
        self.window = window
        self.last_interrupt_time: float | None = None

    def classify(self, timestamp: float) -> InputEvent:
        if (
            self.last_interrupt_time is not None
            and timestamp - self.last_interrupt_time < self.window
        ):
            return InputEvent.EXIT
        self.last_interrupt_time = timestamp
        return InputEvent.CLEAR


class InputManager:
    """
    Supplies user lines to the REPL while listening for SIGINT.

    A background listener task classifies interrupts and posts events on a
    queue; get_input() races the pending line read against that queue.
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        output: TextIO | None = None,
        prompt: str = DEFAULT_PROMPT,
        window: float = 2.0,
        clock: Callable[[], float] = time.monotonic,
        handle_signals: bool = True,
    ):
        self._stream = stream if stream is not None else sys.stdin
        self._output = output if output is not None else sys.stdout
        self.prompt = prompt
        self._clock = clock
        self._handle_signals = handle_signals
        self._classifier = InterruptClassifier(window)
        self._interrupts: asyncio.Queue[float] = asyncio.Queue()
        self._events: asyncio.Queue[InputEvent] = asyncio.Queue()
        self._listener: asyncio.Task | None = None
        self._pending_read: asyncio.Future | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._signal_installed = False
        self._closed = False
        self.state = InputState.IDLE

    def start(self) -> None:
        """Subscribe to SIGINT and start the listener. Needs a running loop."""
        if self._listener is not None:
            return
        self._loop = asyncio.get_running_loop()
        if self._handle_signals:
            self._loop.add_signal_handler(signal.SIGINT, self.notify_interrupt)
            self._signal_installed = True
        self._listener = self._loop.create_task(self._listen())

    def notify_interrupt(self) -> None:
        """Record one interrupt. Called from the signal handler."""
        if self._closed:
            return
        self._interrupts.put_nowait(self._clock())

    async def _listen(self) -> None:
        while True:
            timestamp = await self._interrupts.get()
            event = self._classifier.classify(timestamp)
            await self._events.put(event)
            if event is InputEvent.EXIT:
                return

    async def get_input(self) -> tuple[str, bool]:
        """
        Wait for the next line.

        Returns (text, True) for a completed line, ("", False) when the caller
        should stop: a double interrupt, end of input, or a read error.
        """
        if self._listener is None:
            self.start()

        while True:
            self.state = InputState.IDLE
            if self._pending_read is None:
                self._pending_read = self._start_read()
            read = self._pending_read
            event_wait = asyncio.ensure_future(self._events.get())
            try:
                done, _ = await asyncio.wait(
                    {read, event_wait}, return_when=asyncio.FIRST_COMPLETED
                )
            finally:
                if not event_wait.done():
                    event_wait.cancel()

            if event_wait in done:
                if event_wait.result() is InputEvent.EXIT:
                    self.state = InputState.EXITING
                    return "", False
                # The tty discards the partial line; the pending read is reused.
                self.state = InputState.CLEARING
                self._output.write(CLEAR_LINE + self.prompt)
                self._output.flush()
                continue

            self._pending_read = None
            try:
                line = read.result()
            except (OSError, ValueError):
                self.state = InputState.EXITING
                return "", False
            if not line:
                self.state = InputState.EXITING
                return "", False
            return line.removesuffix("\n"), True

    def _start_read(self) -> asyncio.Future:
        """Read one line on a daemon thread so a blocked read never pins shutdown."""
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def _deliver(result, error):
            if future.done():
                return
            if error is not None:
                future.set_exception(error)
            else:
                future.set_result(result)

        def _reader():
            result, error = None, None
            try:
                result = self._stream.readline()
            except (OSError, ValueError) as e:
                error = e
            try:
                loop.call_soon_threadsafe(_deliver, result, error)
            except RuntimeError:
                # Loop already closed; nobody is waiting for this line.
                return

        threading.Thread(target=_reader, name="input-reader", daemon=True).start()
        return future

    def close(self) -> None:
        """Release the signal subscription and stop the listener. Idempotent."""
        if self._closed:
            return
        self._closed = True
        if self._signal_installed and self._loop is not None and not self._loop.is_closed():
            self._loop.remove_signal_handler(signal.SIGINT)
        self._signal_installed = False
        if self._listener is not None and not self._listener.done():
            self._listener.cancel()
        if self._pending_read is not None and not self._pending_read.done():
            self._pending_read.cancel()
        self._pending_read = None
