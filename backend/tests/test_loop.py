"""Tests for the completion/tool loop, using scripted providers and fake tools."""
from __future__ import annotations

import asyncio
import unittest
import uuid

from src.ferret.errors import SearchError
from src.ferret.events import EventEmitter
from src.ferret.loop import ITERATION_LIMIT_MESSAGE, LoopOptions, LoopOutcome, run_loop
from src.ferret.models import (
    ChunkEvent,
    DoneEvent,
    ErrorEvent,
    Message,
    SearchResult,
    ToolEndEvent,
    ToolResult,
    ToolStartEvent,
)
from src.ferret.session_store import SessionStore
from src.ferret.tools import SearchTool, ToolExecutor
from src.ferret.tools.executor import BaseTool
from tests.helpers import FakeSearchProvider, ScriptedProvider, drain, provider_failure

SYSTEM_PROMPT = "You are a test assistant."


class _RecordingFetchTool(BaseTool):
    """Fetch tool that fails for URLs containing 'bad' and records call order."""

    def __init__(self, log: list[str]):
        self.log = log

    @property
    def name(self) -> str:
        return "fetch"

    async def execute(self, argument: str) -> ToolResult:
        self.log.append(f"fetch:{argument}")
        ok = "bad" not in argument
        body = "page text" if ok else "Error: HTTP 500"
        return ToolResult(tool="fetch", success=ok, content=f"[Tool Result: fetch]\n{body}\n[End Tool Result]")


class TestRunLoop(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.store = SessionStore()
        self.session_id = uuid.uuid4()
        self.store.get_or_create(self.session_id)
        self.search = FakeSearchProvider(
            [SearchResult(title="BBC Weather", url="https://bbc.com/weather", snippet="10°C, cloudy")]
        )
        self.tools = ToolExecutor([SearchTool(self.search)])

    async def _run(self, provider: ScriptedProvider, message: str, tools: ToolExecutor | None = None, **opts):
        emitter = EventEmitter()
        outcome = await run_loop(
            self.session_id,
            message,
            store=self.store,
            tools=tools or self.tools,
            emitter=emitter,
            options=LoopOptions(system_prompt=SYSTEM_PROMPT, llm_provider=provider, **opts),
        )
        return outcome, await drain(emitter)

    async def test_tool_free_answer_emits_chunk_then_done(self) -> None:
        provider = ScriptedProvider(["Hello there."])
        outcome, events = await self._run(provider, "hi")
        self.assertEqual(outcome, LoopOutcome.ANSWERED)
        self.assertEqual(events, [ChunkEvent(content="Hello there."), DoneEvent()])
        history = self.store.snapshot(self.session_id)
        self.assertEqual(history, [Message(role="user", content="hi"), Message(role="assistant", content="Hello there.")])

    async def test_prompt_starts_with_system_instruction(self) -> None:
        self.store.append_message(self.session_id, Message(role="user", content="earlier"))
        self.store.append_message(self.session_id, Message(role="assistant", content="reply"))
        provider = ScriptedProvider(["ok"])
        await self._run(provider, "now")
        sent = provider.calls[0]
        self.assertEqual(sent[0], Message(role="system", content=SYSTEM_PROMPT))
        self.assertEqual([m.content for m in sent[1:]], ["earlier", "reply", "now"])

    async def test_weather_scenario(self) -> None:
        provider = ScriptedProvider(["Let me check. <search>weather London</search>", "10°C, cloudy."])
        outcome, events = await self._run(provider, "What's the weather in London?")

        self.assertEqual(outcome, LoopOutcome.ANSWERED)
        self.assertEqual(
            events,
            [
                ToolStartEvent(tool="search", query="weather London"),
                ToolEndEvent(tool="search", success=True),
                ChunkEvent(content="10°C, cloudy."),
                DoneEvent(),
            ],
        )
        history = self.store.snapshot(self.session_id)
        self.assertEqual(len(history), 3)
        self.assertEqual(history[0], Message(role="user", content="What's the weather in London?"))
        self.assertEqual(history[1].role, "assistant")
        self.assertTrue(history[1].content.startswith("Let me check. <search>weather London</search>\n\n[Tool Result: search]"))
        self.assertIn("BBC Weather", history[1].content)
        self.assertEqual(history[2], Message(role="assistant", content="10°C, cloudy."))
        # Second completion call sees the tool results.
        self.assertEqual(provider.calls[1][-1], history[1])

    async def test_tools_run_sequentially_in_parse_order(self) -> None:
        log: list[str] = []
        tools = ToolExecutor([SearchTool(self.search), _RecordingFetchTool(log)])
        provider = ScriptedProvider(
            ["<fetch>https://a.example</fetch><search>B</search><fetch>https://bad.example</fetch>", "done."]
        )
        _, events = await self._run(provider, "go", tools=tools)
        self.assertEqual(
            events[:6],
            [
                ToolStartEvent(tool="search", query="B"),
                ToolEndEvent(tool="search", success=True),
                ToolStartEvent(tool="fetch", query="https://a.example"),
                ToolEndEvent(tool="fetch", success=True),
                ToolStartEvent(tool="fetch", query="https://bad.example"),
                ToolEndEvent(tool="fetch", success=False),
            ],
        )
        self.assertEqual(log, ["fetch:https://a.example", "fetch:https://bad.example"])

    async def test_failed_tool_is_fed_back_and_loop_continues(self) -> None:
        failing = FakeSearchProvider(error=SearchError("Status 503: down"))
        tools = ToolExecutor([SearchTool(failing)])
        provider = ScriptedProvider(["<search>x</search>", "No luck with that search, I'm afraid."])
        outcome, events = await self._run(provider, "find x", tools=tools)
        self.assertEqual(outcome, LoopOutcome.ANSWERED)
        self.assertIn(ToolEndEvent(tool="search", success=False), events)
        self.assertIn("Error: Status 503: down", self.store.snapshot(self.session_id)[1].content)

    async def test_provider_failure_emits_error_then_done(self) -> None:
        provider = ScriptedProvider([provider_failure("Ollama error: connection refused")])
        outcome, events = await self._run(provider, "hi")
        self.assertEqual(outcome, LoopOutcome.ERRORED)
        self.assertEqual(events, [ErrorEvent(message="Ollama error: connection refused"), DoneEvent()])
        self.assertEqual(self.store.snapshot(self.session_id), [Message(role="user", content="hi")])

    async def test_provider_failure_after_tool_turn_keeps_earlier_turns(self) -> None:
        provider = ScriptedProvider(["<search>q</search>", provider_failure()])
        outcome, events = await self._run(provider, "hi")
        self.assertEqual(outcome, LoopOutcome.ERRORED)
        self.assertEqual([e.type for e in events], ["tool_start", "tool_end", "error", "done"])
        self.assertEqual(len(self.store.snapshot(self.session_id)), 2)

    async def test_iteration_limit(self) -> None:
        provider = ScriptedProvider(["<search>again</search>"], repeat_last=True)
        outcome, events = await self._run(provider, "loop forever")
        self.assertEqual(outcome, LoopOutcome.ITERATION_LIMIT)
        self.assertEqual(len(provider.calls), 5)
        self.assertEqual([e.type for e in events], ["tool_start", "tool_end"] * 5 + ["error", "done"])
        self.assertEqual(events[-2], ErrorEvent(message=ITERATION_LIMIT_MESSAGE))
        history = self.store.snapshot(self.session_id)
        self.assertEqual(len(history), 6)
        self.assertTrue(history[-1].content.startswith("<search>again</search>"))

    async def test_custom_iteration_cap(self) -> None:
        provider = ScriptedProvider(["<search>again</search>"], repeat_last=True)
        outcome, _ = await self._run(provider, "loop", max_tool_iterations=2)
        self.assertEqual(outcome, LoopOutcome.ITERATION_LIMIT)
        self.assertEqual(len(provider.calls), 2)

    async def test_loop_runs_to_completion_without_a_listener(self) -> None:
        emitter = EventEmitter()
        emitter.detach()
        provider = ScriptedProvider(["<search>q</search>", "answer"])
        outcome = await run_loop(
            self.session_id,
            "hi",
            store=self.store,
            tools=self.tools,
            emitter=emitter,
            options=LoopOptions(system_prompt=SYSTEM_PROMPT, llm_provider=provider),
        )
        self.assertEqual(outcome, LoopOutcome.ANSWERED)
        self.assertEqual(self.store.snapshot(self.session_id)[-1].content, "answer")

    async def test_concurrent_requests_on_one_session_lose_nothing(self) -> None:
        first = ScriptedProvider(["<search>slow</search>", "answer one"], delay=0.02)
        second = ScriptedProvider(["answer two"], delay=0.01)
        await asyncio.gather(self._run(first, "question one"), self._run(second, "question two"))

        contents = [m.content for m in self.store.snapshot(self.session_id)]
        self.assertEqual(len(contents), 5)
        for expected in ("question one", "question two", "answer one", "answer two"):
            self.assertIn(expected, contents)
        self.assertTrue(any(c.startswith("<search>slow</search>") for c in contents))


if __name__ == "__main__":
    unittest.main()
