import asyncio
import io
import os
import unittest

from cli.input_manager import (
    CLEAR_LINE,
    InputEvent,
    InputManager,
    InputState,
    InterruptClassifier,
)


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestInterruptClassifier(unittest.TestCase):
    def test_first_interrupt_clears(self):
        classifier = InterruptClassifier(window=2.0)
        self.assertEqual(classifier.classify(0.0), InputEvent.CLEAR)
        self.assertEqual(classifier.last_interrupt_time, 0.0)

    def test_quick_second_interrupt_exits(self):
        classifier = InterruptClassifier(window=2.0)
        classifier.classify(10.0)
        self.assertEqual(classifier.classify(11.5), InputEvent.EXIT)

    def test_slow_second_interrupt_clears_again(self):
        classifier = InterruptClassifier(window=2.0)
        self.assertEqual(classifier.classify(10.0), InputEvent.CLEAR)
        self.assertEqual(classifier.classify(13.0), InputEvent.CLEAR)
        self.assertEqual(classifier.last_interrupt_time, 13.0)

    def test_exit_does_not_move_reference_point(self):
        classifier = InterruptClassifier(window=2.0)
        classifier.classify(10.0)
        classifier.classify(11.0)
        self.assertEqual(classifier.last_interrupt_time, 10.0)


class TestInputManager(unittest.IsolatedAsyncioTestCase):
    def _pipe(self):
        read_fd, write_fd = os.pipe()
        reader = os.fdopen(read_fd, "r")
        writer = os.fdopen(write_fd, "w")
        # Closing the writer hands the reader thread EOF so it can finish.
        self.addCleanup(lambda: writer.closed or writer.close())
        return reader, writer

    async def test_reads_line_without_newline(self):
        manager = InputManager(stream=io.StringIO("test input\n"), output=io.StringIO(), handle_signals=False)
        self.addCleanup(manager.close)

        text, ok = await manager.get_input()

        self.assertTrue(ok)
        self.assertEqual(text, "test input")
        self.assertEqual(manager.state, InputState.IDLE)

    async def test_consecutive_lines(self):
        manager = InputManager(stream=io.StringIO("one\ntwo\n"), output=io.StringIO(), handle_signals=False)
        self.addCleanup(manager.close)

        self.assertEqual(await manager.get_input(), ("one", True))
        self.assertEqual(await manager.get_input(), ("two", True))

    async def test_eof_stops(self):
        manager = InputManager(stream=io.StringIO(""), output=io.StringIO(), handle_signals=False)
        self.addCleanup(manager.close)

        text, ok = await manager.get_input()

        self.assertFalse(ok)
        self.assertEqual(text, "")
        self.assertEqual(manager.state, InputState.EXITING)

    async def test_single_interrupt_clears_and_retries(self):
        reader, writer = self._pipe()
        output = io.StringIO()
        manager = InputManager(stream=reader, output=output, prompt="> ", handle_signals=False)
        self.addCleanup(manager.close)

        task = asyncio.create_task(manager.get_input())
        await asyncio.sleep(0.05)
        manager.notify_interrupt()
        await asyncio.sleep(0.05)

        self.assertFalse(task.done())
        self.assertEqual(output.getvalue(), CLEAR_LINE + "> ")

        writer.write("after clear\n")
        writer.flush()
        text, ok = await asyncio.wait_for(task, timeout=2)

        self.assertTrue(ok)
        self.assertEqual(text, "after clear")

    async def test_double_interrupt_exits(self):
        reader, _ = self._pipe()
        clock = FakeClock()
        manager = InputManager(stream=reader, output=io.StringIO(), clock=clock, handle_signals=False)
        self.addCleanup(manager.close)

        task = asyncio.create_task(manager.get_input())
        await asyncio.sleep(0.01)
        manager.notify_interrupt()
        clock.now += 0.5
        manager.notify_interrupt()

        text, ok = await asyncio.wait_for(task, timeout=2)

        self.assertFalse(ok)
        self.assertEqual(text, "")
        self.assertEqual(manager.state, InputState.EXITING)

    async def test_interrupts_outside_window_keep_reading(self):
        reader, writer = self._pipe()
        clock = FakeClock()
        manager = InputManager(stream=reader, output=io.StringIO(), clock=clock, handle_signals=False)
        self.addCleanup(manager.close)

        task = asyncio.create_task(manager.get_input())
        await asyncio.sleep(0.01)
        manager.notify_interrupt()
        clock.now += 3.0
        manager.notify_interrupt()
        await asyncio.sleep(0.05)
        self.assertFalse(task.done())

        writer.write("still here\n")
        writer.flush()
        self.assertEqual(await asyncio.wait_for(task, timeout=2), ("still here", True))

    async def test_close_is_idempotent(self):
        manager = InputManager(stream=io.StringIO(""), output=io.StringIO())
        manager.start()

        manager.close()
        manager.close()

        # Interrupts after close are ignored
        manager.notify_interrupt()


if __name__ == "__main__":
    unittest.main()
