"""
Session - bounded agent loop over one adapter

Responsibilities:
- Append the prompt and every streamed entry to the transcript, in order
- Run tool calls the adapter left pending and append their outputs
- Loop adapter steps until no tool calls remain (bounded by max_steps)
- Aggregate token usage per turn and over the session lifetime
- Assemble the final content: joined text, or one decoded structured value

Does NOT handle:
- Backend wire formats (adapters)
- Retrying failed steps (transport concern)
- Concurrent turns: one writer per session

Turn state machine:

    append PromptEntry
    for step in 1..max_steps:
        stream adapter.respond(...) -> append entries, merge usage
        structured Response segment (structured mode) -> done
        execute pending tool calls -> append ToolOutputs
        no ToolCalls this step -> done
"""

import asyncio
import json
from contextlib import aclosing
from typing import Any, AsyncIterator, Callable, Generic, Iterable

from pydantic import TypeAdapter, ValidationError

from agentloop.config import settings
from agentloop.domain.context import ContextT, PromptContext
from agentloop.domain.errors import StructuredContentParsingError, UnexpectedStructuredResponseError
from agentloop.domain.transcript import (
    PromptEntry,
    Response,
    StructuredSegment,
    ToolCalls,
    Transcript,
    pending_tool_calls,
)
from agentloop.domain.updates import AgentResponse, AgentUpdate, TokenUsageUpdate, TranscriptUpdate
from agentloop.domain.usage import TokenUsage
from agentloop.llm.base import Adapter, GenerationOptions, is_text_type, type_name
from agentloop.llm.simulation import SimulationAdapter, SimulationConfiguration, SimulationStep
from agentloop.prompt.builder import render
from agentloop.prompt.link_preview import LinkPreviewProvider
from agentloop.runtime.wire import Wire
from agentloop.tools.base import AgentTool, decode_content
from agentloop.tools.executor import ToolExecutor
from agentloop.tools.resolver import ToolResolver
from agentloop.utils import agent_log
from agentloop.utils.logging import get_logger

logger = get_logger(__name__)

EmbedFunction = Callable[[str, PromptContext[Any]], Any]


class Session(Generic[ContextT]):
    """
    A conversation with one model backend.

    Args:
        adapter: Backend adapter (its tools are the session's tools)
        max_steps: Upper bound on adapter steps per turn (>= 1); defaults to
            settings.max_steps
        link_preview_provider: Fetches previews for URLs in context-aware
            prompts; defaults to one built from settings when enabled

    Examples:
        >>> session = Session(OpenAIAdapter(tools=[calculator]))
        >>> result = await session.respond("What is 2+2?")
        >>> result.content
        '4'
    """

    def __init__(
        self,
        adapter: Adapter,
        *,
        max_steps: int | None = None,
        link_preview_provider: LinkPreviewProvider | None = None,
    ):
        self.adapter = adapter
        self.max_steps = settings.max_steps if max_steps is None else max_steps
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be at least 1, got {self.max_steps}")
        if link_preview_provider is None and settings.fetch_link_previews:
            link_preview_provider = LinkPreviewProvider(timeout=settings.link_preview_timeout)
        self.link_preview_provider = link_preview_provider

        self._executor = ToolExecutor(adapter.tools)
        self._transcript: Transcript[ContextT] = Transcript()
        self._usage = TokenUsage()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def transcript(self) -> Transcript[ContextT]:
        """The conversation so far. Treat as read-only."""
        return self._transcript

    @property
    def usage(self) -> TokenUsage:
        """Token usage over the session lifetime."""
        return self._usage

    def clear_transcript(self) -> None:
        """Start a fresh conversation. Usage is kept; see reset_usage()."""
        self._transcript = Transcript()

    def reset_usage(self) -> None:
        self._usage = TokenUsage()

    def tool_resolver(self, tools: Iterable[AgentTool]) -> ToolResolver:
        """Resolver for typed tool runs over this session's transcript."""
        return ToolResolver(tools, self._transcript)

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    async def respond(
        self,
        input: str,
        *,
        generating: Any = str,
        model: Any = None,
        options: GenerationOptions | None = None,
    ) -> AgentResponse:
        """
        Run one turn with a plain prompt.

        Args:
            input: User input, sent as-is
            generating: str for text, or a type to decode structured output into
            model: Backend model; defaults to the adapter's default model
            options: Generation options; defaults to automatic options for model

        Returns:
            AgentResponse: content, entries added this turn, turn usage
        """
        prompt = PromptEntry(input=input, embedded_prompt=input)
        return await self._run_turn(prompt, generating, model, options, self.adapter)

    async def respond_with_context(
        self,
        input: str,
        context_items: Iterable[ContextT],
        embed: EmbedFunction,
        *,
        generating: Any = str,
        model: Any = None,
        options: GenerationOptions | None = None,
    ) -> AgentResponse:
        """
        Run one turn with context kept separate from the user's input.

        embed(input, context) builds what is actually sent: a string or any
        prompt node (Prompt, PromptSection, PromptTag, ...). The transcript
        keeps the raw input and the context alongside the embedded prompt.
        """
        prompt = await self._build_prompt(input, context_items, embed)
        return await self._run_turn(prompt, generating, model, options, self.adapter)

    async def stream(
        self,
        input: str,
        *,
        generating: Any = str,
        model: Any = None,
        options: GenerationOptions | None = None,
        context_items: Iterable[ContextT] | None = None,
        embed: EmbedFunction | None = None,
    ) -> AsyncIterator[AgentUpdate]:
        """
        Run one turn in a background task and stream its updates.

        Closing the iterator (or cancelling the consumer) cancels the turn.
        Entries already appended stay in the transcript. Turn failures are
        raised from the iterator after the updates that preceded them.
        """
        if embed is not None:
            prompt = await self._build_prompt(input, context_items or [], embed)
        else:
            prompt = PromptEntry(input=input, embedded_prompt=input)

        wire = Wire()

        async def produce() -> None:
            try:
                await self._run_turn(prompt, generating, model, options, self.adapter, wire=wire)
            except asyncio.CancelledError:
                await wire.close()
                raise
            except Exception as e:
                await wire.fail(e)
            else:
                await wire.close()

        task = asyncio.create_task(produce())
        try:
            async for update in wire.read():
                yield update
        finally:
            if not task.done():
                task.cancel()
                try:
                    await task
                except asyncio.CancelledError:
                    logger.info("turn_stream_closed", reason="consumer_closed")

    async def simulate_response(
        self,
        input: str,
        steps: Iterable[SimulationStep],
        *,
        generating: Any = str,
        configuration: SimulationConfiguration | None = None,
    ) -> AgentResponse:
        """Run one turn against a scripted SimulationAdapter instead of the backend."""
        adapter = SimulationAdapter(steps, configuration)
        prompt = PromptEntry(input=input, embedded_prompt=input)
        return await self._run_turn(prompt, generating, adapter.default_model, None, adapter)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def _build_prompt(
        self,
        input: str,
        context_items: Iterable[ContextT],
        embed: EmbedFunction,
    ) -> PromptEntry:
        link_previews = []
        if self.link_preview_provider is not None:
            link_previews = await self.link_preview_provider.previews_for(input)

        context = PromptContext(sources=list(context_items), link_previews=link_previews)
        return PromptEntry(input=input, context=context, embedded_prompt=render(embed(input, context)))

    async def _run_turn(
        self,
        prompt: PromptEntry,
        generating: Any,
        model: Any,
        options: GenerationOptions | None,
        adapter: Adapter,
        wire: Wire | None = None,
    ) -> AgentResponse:
        model = model if model is not None else adapter.default_model
        options = options if options is not None else adapter.default_options(model)
        executor = self._executor if adapter is self.adapter else ToolExecutor(adapter.tools)
        text_mode = is_text_type(generating)

        added: list[Any] = []
        texts: list[str] = []
        structured: StructuredSegment | None = None
        turn_usage: TokenUsage | None = None
        finished = False
        step = 0

        async def emit(update: AgentUpdate) -> None:
            if wire is not None:
                await wire.write(update)

        async def append(entry: Any, step_entries: list[Any]) -> None:
            self._transcript.append(entry)
            added.append(entry)
            step_entries.append(entry)
            agent_log.entry(entry)
            await emit(TranscriptUpdate(entry=entry))

        self._transcript.append(prompt)
        agent_log.start(model, adapter.tool_names, prompt.input)

        try:
            while step < self.max_steps:
                step += 1
                agent_log.step_request(step)
                step_entries: list[Any] = []

                updates = adapter.respond(prompt, generating, model, self._transcript.snapshot(), options)
                async with aclosing(updates) as stream:
                    async for update in stream:
                        if isinstance(update, TokenUsageUpdate):
                            self._usage.merge(update.usage)
                            turn_usage = TokenUsage.combine(turn_usage, update.usage)
                            agent_log.token_usage(update.usage)
                            await emit(update)
                            continue

                        entry = update.entry
                        await append(entry, step_entries)

                        if not isinstance(entry, Response):
                            continue
                        if text_mode:
                            texts.extend(s.content for s in entry.text_segments())
                        elif entry.structured_segments():
                            structured = entry.structured_segments()[0]
                            break

                # A structured response ends the turn, even with tool calls in the same step
                if structured is not None:
                    finished = True
                    break

                for output in await executor.execute_all(pending_tool_calls(step_entries)):
                    await append(output, step_entries)

                if not any(isinstance(e, ToolCalls) for e in step_entries):
                    finished = True
                    break

            if not finished:
                logger.warning("max_steps_reached", max_steps=self.max_steps, adapter=adapter.name)

            content = self._final_content(generating, text_mode, texts, structured)

        except asyncio.CancelledError:
            logger.info("turn_cancelled", step=step, added_entries=len(added))
            raise
        except Exception as e:
            agent_log.error(e, context="respond")
            raise

        agent_log.finish(steps=step)
        return AgentResponse(content=content, added_entries=added, usage=turn_usage)

    def _final_content(
        self,
        generating: Any,
        text_mode: bool,
        texts: list[str],
        structured: StructuredSegment | None,
    ) -> Any:
        if text_mode:
            return "\n".join(texts)

        if structured is None:
            raise UnexpectedStructuredResponseError(type_name(generating))

        try:
            return decode_content(TypeAdapter(generating), structured)
        except ValidationError as e:
            raise StructuredContentParsingError(json.dumps(structured.content), e) from e


ModelSession = Session


__all__ = ["Session", "ModelSession", "EmbedFunction"]
