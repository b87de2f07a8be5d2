"""ChatClient - direct HTTP communication with an OpenAI-compatible chat API."""

import asyncio
import json
import logging
from typing import Awaitable, Callable, Iterable, TypeVar

import aiohttp
from agent.exceptions import TransportError
from agent.turns import ROLE_ASSISTANT, ROLE_TOOL, ToolCall, ToolDeclaration, Turn


T = TypeVar("T")


class ChatClient:
    """Async HTTP client for the ``/chat/completions`` endpoint.

    One call to :meth:`complete` is one request/response exchange that
    yields exactly one assistant turn or raises :class:`TransportError`.
    """

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str = "",
        connect_timeout: float = 10.0,
        read_timeout: float = 300.0,
        max_retries: int = 3,
        logger: logging.Logger | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.api_key = api_key
        self.connect_timeout = connect_timeout
        self.read_timeout = read_timeout
        self.max_retries = max_retries
        self._logger = logger or logging.getLogger(__name__)

    async def complete(self, turns: Iterable[Turn], tools: Iterable[ToolDeclaration]) -> Turn:
        """Send the conversation and tool declarations. POST /chat/completions"""
        payload = {
            "model": self.model,
            "messages": [self.serialize_turn(t) for t in turns],
        }
        declared = [self.serialize_declaration(d) for d in tools]
        if declared:
            payload["tools"] = declared

        async def _request() -> dict:
            async with aiohttp.ClientSession(timeout=self._timeout()) as session:
                async with session.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._headers(),
                ) as resp:
                    if resp.status != 200:
                        body = await resp.text()
                        raise TransportError(
                            f"Chat completion failed (HTTP {resp.status}): {body}"
                        )
                    try:
                        return await resp.json(content_type=None)
                    except (json.JSONDecodeError, aiohttp.ContentTypeError) as e:
                        raise TransportError(f"Chat completion returned invalid JSON: {e}") from e

        data = await self._with_retry("chat completion", _request)
        return self.parse_response(data)

    # ── Wire format ──────────────────────────────────────────────────

    @staticmethod
    def serialize_turn(turn: Turn) -> dict:
        message: dict = {"role": turn.role, "content": turn.text}
        if turn.role == ROLE_ASSISTANT and turn.tool_calls:
            message["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.raw_arguments},
                }
                for call in turn.tool_calls
            ]
        if turn.role == ROLE_TOOL:
            message["tool_call_id"] = turn.tool_call_id
        return message

    @staticmethod
    def serialize_declaration(declaration: ToolDeclaration) -> dict:
        return {
            "type": "function",
            "function": {
                "name": declaration.name,
                "description": declaration.description,
                "parameters": declaration.parameters,
            },
        }

    @staticmethod
    def parse_response(data: object) -> Turn:
        """Turn a chat completion body into an assistant Turn."""
        if not isinstance(data, dict):
            raise TransportError("Chat completion response is not a JSON object")
        choices = data.get("choices") or []
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            raise TransportError("Chat completion response contained no choices")
        message = choices[0].get("message") or {}
        if not isinstance(message, dict):
            raise TransportError("Chat completion message is not a JSON object")

        raw_calls = message.get("tool_calls") or []
        if not isinstance(raw_calls, list):
            raise TransportError("Chat completion tool_calls is not a list")

        tool_calls = []
        for raw in raw_calls:
            if not isinstance(raw, dict):
                raise TransportError("Chat completion tool call is not a JSON object")
            if raw.get("type", "function") != "function":
                continue
            function = raw.get("function") or {}
            if not isinstance(function, dict):
                raise TransportError("Chat completion tool call function is not a JSON object")
            arguments = function.get("arguments")
            if arguments is None:
                arguments = "{}"
            elif not isinstance(arguments, str):
                arguments = json.dumps(arguments)
            tool_calls.append(ToolCall(
                id=str(raw.get("id", "")),
                name=str(function.get("name", "")),
                raw_arguments=arguments,
            ))

        content = message.get("content") or ""
        if not isinstance(content, str):
            raise TransportError("Chat completion content is not a string")
        return Turn.assistant(text=content, tool_calls=tool_calls)

    # ── Plumbing ─────────────────────────────────────────────────────

    def _headers(self) -> dict[str, str]:
        if self.api_key:
            return {"Authorization": f"Bearer {self.api_key}"}
        return {}

    def _timeout(self) -> aiohttp.ClientTimeout:
        """Build a client timeout configuration from settings."""
        return aiohttp.ClientTimeout(
            total=None,
            connect=self.connect_timeout,
            sock_connect=self.connect_timeout,
            sock_read=self.read_timeout,
        )

    async def _with_retry(self, operation: str, func: Callable[[], Awaitable[T]]) -> T:
        """Run an async operation with exponential backoff retries."""
        delay = 1.0
        last_error: Exception | None = None
        for attempt in range(1, self.max_retries + 1):
            try:
                return await func()
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_error = e
                if attempt >= self.max_retries:
                    break
                self._logger.warning(
                    "%s attempt %d/%d failed: %s", operation, attempt, self.max_retries, e
                )
                await asyncio.sleep(delay)
                delay *= 2

        raise TransportError(self._connection_error_message(operation, last_error))

    def _connection_error_message(self, operation: str, error: Exception | None) -> str:
        """Create a user-friendly connection error message."""
        details = f"{error}" if error else "unknown error"
        return (
            f"Cannot reach {self.base_url} during {operation} "
            f"(after {self.max_retries} attempt(s)): {details}"
        )
