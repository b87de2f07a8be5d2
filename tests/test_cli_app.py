import io
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from agent.config import AgentConfig
from agent.exceptions import TransportError
from cli.cli_app import CLIApp
from cli.input_manager import InputManager
from mock_transport import MockTransport, make_call


class TestCLIApp(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmpdir = Path(self._tmp.name)
        self.config = AgentConfig(log_dir=str(self.tmpdir / "logs"))

    def tearDown(self):
        self._tmp.cleanup()

    def _make_app(self, lines: str, transport: MockTransport) -> CLIApp:
        manager = InputManager(stream=io.StringIO(lines), output=io.StringIO(), handle_signals=False)
        return CLIApp(self.config, client=transport, input_manager=manager)

    async def test_each_line_drives_the_agent(self):
        transport = MockTransport()
        transport.add_response("", [make_call("call-1", "list_dir", {"path": str(self.tmpdir)})])
        transport.add_response("First answer")
        transport.add_response("Second answer")
        app = self._make_app("hello\n\n   \nagain\n", transport)

        with mock.patch("sys.stdout", new_callable=io.StringIO) as out:
            await app.run()

        self.assertEqual(transport.call_count, 3)
        self.assertEqual(
            [t.role for t in app.conversation],
            ["user", "assistant", "tool", "assistant", "user", "assistant"],
        )
        printed = out.getvalue()
        self.assertIn("Chat with", printed)
        self.assertIn("Tool call: list_dir", printed)
        self.assertIn("First answer", printed)
        self.assertIn("Second answer", printed)

    async def test_transport_error_reported_and_loop_continues(self):
        transport = MockTransport()
        transport.add_error(TransportError("endpoint down"))
        transport.add_response("Recovered")
        app = self._make_app("one\ntwo\n", transport)

        with mock.patch("sys.stdout", new_callable=io.StringIO) as out:
            await app.run()

        printed = out.getvalue()
        self.assertIn("Error: error creating chat completion (iteration 1): endpoint down", printed)
        self.assertIn("Recovered", printed)
        self.assertEqual(transport.call_count, 2)

    async def test_reset_command_starts_new_conversation(self):
        transport = MockTransport()
        transport.add_response("before")
        transport.add_response("after")
        app = self._make_app("first\n/reset\nsecond\n", transport)

        with mock.patch("sys.stdout", new_callable=io.StringIO):
            await app.run()

        self.assertEqual(len(app.conversation), 2)
        self.assertEqual(app.conversation[0].text, "second")

    async def test_exit_command_stops(self):
        transport = MockTransport()
        app = self._make_app("/exit\nnever read\n", transport)

        with mock.patch("sys.stdout", new_callable=io.StringIO):
            await app.run()

        self.assertEqual(transport.call_count, 0)


if __name__ == "__main__":
    unittest.main()
