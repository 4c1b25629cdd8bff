"""Claude actions."""

from __future__ import annotations

import json
import logging
from typing import Any

from wakflo.integrations.claude.client import ClaudeClient
from wakflo.integrations.claude.schemas import (
    DEFAULT_MODEL,
    LANGUAGES,
    ChatProps,
    Formality,
    SummarizeProps,
    SummaryLength,
    SummaryStyle,
    TranslateProps,
    language_name,
)
from wakflo.sdk.action import Action, ActionMetadata
from wakflo.sdk.client import ClientConfig
from wakflo.sdk.context import PerformContext
from wakflo.sdk.form import FieldBuilder, FormBuilder, FormSchema, Option, new_form

logger = logging.getLogger(__name__)

MODEL_OPTIONS = (
    Option("claude-sonnet-4-5", "Claude Sonnet 4.5"),
    Option("claude-opus-4-1", "Claude Opus 4.1"),
    Option("claude-sonnet-4-0", "Claude Sonnet 4"),
    Option("claude-opus-4-0", "Claude Opus 4"),
    Option("claude-3-7-sonnet-latest", "Claude Sonnet 3.7"),
    Option("claude-3-5-haiku-latest", "Claude Haiku 3.5"),
    Option("claude-3-haiku-20240307", "Claude Haiku 3"),
)

TRANSLATOR_SYSTEM_PROMPT = (
    "You are a professional translator with native-level fluency in multiple languages. "
    "Provide accurate, natural-sounding translations that preserve meaning, context and "
    "cultural nuances, preferring idiomatic equivalents over literal translations."
)


def register_model_field(form: FormBuilder) -> FieldBuilder:
    return (
        form.select_field("model", "Model")
        .placeholder("Select a Claude model")
        .required()
        .add_options(*MODEL_OPTIONS)
        .default_value(DEFAULT_MODEL)
    )


class _ClaudeAction(Action):
    integration = "claude"

    def __init__(self, config: ClientConfig):
        self.config = config

    def _client(self, ctx: PerformContext) -> ClaudeClient:
        return ClaudeClient(self.config, ctx.auth_context(self.integration))


class ChatClaudeAction(_ClaudeAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="chat_claude",
            display_name="Chat with Claude",
            description="Send a message to Claude and return its reply.",
            sample_output={
                "response": "Hello! I'd be happy to help you...",
                "model": DEFAULT_MODEL,
                "usage": {"input_tokens": 10, "output_tokens": 50, "total_tokens": 60},
                "stop_reason": "end_turn",
            },
        )

    def properties(self) -> FormSchema:
        form = new_form("chat_claude", "Chat with Claude")
        register_model_field(form)
        form.textarea_field("prompt", "Message").required().placeholder(
            "Enter your message to Claude"
        )
        form.textarea_field("system", "System Prompt").placeholder(
            "You are a helpful assistant..."
        )
        form.number_field("temperature", "Temperature").min_value(0).max_value(1).help_text(
            "Controls randomness (0=focused, 1=creative)"
        )
        form.number_field("max_tokens", "Max Tokens").min_value(1).placeholder("1024")
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, ChatProps)
        async with self._client(ctx) as client:
            completion = await client.complete(
                model=props.model,
                prompt=props.prompt,
                system=props.system,
                max_tokens=props.max_tokens,
                temperature=props.temperature,
                operation=self.operation_id,
            )
        return {
            "response": completion.text,
            "model": completion.model,
            "usage": completion.usage,
            "stop_reason": completion.stop_reason,
        }


class SummarizeTextAction(_ClaudeAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="summarize_text_claude",
            display_name="Summarize Text",
            description="Generate a concise summary of a document, article or other long text.",
            sample_output={"summary": "This document discusses...", "model": DEFAULT_MODEL},
        )

    def properties(self) -> FormSchema:
        form = new_form("summarize_text_claude", "Summarize Text")
        register_model_field(form)
        form.textarea_field("text", "Text to Summarize").required()
        form.select_field("style", "Summary Style").add_options(
            Option(SummaryStyle.EXECUTIVE.value, "Executive Summary"),
            Option(SummaryStyle.BULLETS.value, "Bullet Points"),
            Option(SummaryStyle.ABSTRACT.value, "Academic Abstract"),
            Option(SummaryStyle.SIMPLE.value, "Simple Language"),
            Option(SummaryStyle.TECHNICAL.value, "Technical Summary"),
        )
        form.select_field("max_length", "Length").add_options(
            Option(SummaryLength.BRIEF.value, "Brief (1-2 paragraphs)"),
            Option(SummaryLength.MODERATE.value, "Moderate (3-4 paragraphs)"),
            Option(SummaryLength.DETAILED.value, "Detailed (5+ paragraphs)"),
        )
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, SummarizeProps)
        async with self._client(ctx) as client:
            completion = await client.complete(
                model=props.model,
                prompt=props.prompt(),
                max_tokens=2048,
                operation=self.operation_id,
            )
        return {
            "summary": completion.text,
            "model": completion.model,
            "style": props.style.value if props.style else None,
        }


class TranslateTextAction(_ClaudeAction):
    def metadata(self) -> ActionMetadata:
        return ActionMetadata(
            id="translate_text_claude",
            display_name="Translate Text",
            description=(
                "Translate text between languages with optional tone and formality control."
            ),
            sample_output={
                "translated_text": "Bonjour le monde",
                "source_language": "English",
                "target_language": "French",
                "model": DEFAULT_MODEL,
            },
        )

    def properties(self) -> FormSchema:
        languages = [Option(code, name) for code, name in LANGUAGES.items() if code != "auto"]
        form = new_form("translate_text_claude", "Translate Text")
        register_model_field(form)
        form.textarea_field("text", "Text to Translate").required()
        form.select_field("target_lang", "Target Language").required().add_options(*languages)
        form.select_field("source_lang", "Source Language").add_options(
            Option("auto", "Auto-detect"), *languages
        ).default_value("auto")
        form.select_field("formality", "Formality Level").add_options(
            *(Option(f.value, f.value.capitalize()) for f in Formality)
        ).default_value(Formality.AUTO.value)
        form.checkbox_field("preserve_tone", "Preserve Tone").default_value(False)
        form.number_field("temperature", "Temperature").min_value(0).max_value(1)
        return form.build()

    async def perform(self, ctx: PerformContext) -> dict[str, Any]:
        props = self.decode_input(ctx, TranslateProps)
        async with self._client(ctx) as client:
            completion = await client.complete(
                model=props.model,
                prompt=props.prompt(),
                system=TRANSLATOR_SYSTEM_PROMPT,
                max_tokens=4096,
                temperature=props.temperature,
                operation=self.operation_id,
            )

        result: dict[str, Any] = {
            "source_language": language_name(props.source_lang),
            "target_language": language_name(props.target_lang),
            "formality": props.formality.value,
            "model": completion.model,
            "usage": completion.usage,
        }
        try:
            parsed = json.loads(completion.text)
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            result.update(parsed)
        else:
            logger.debug("[claude] Translation reply was not JSON, returning raw text")
            result["translated_text"] = completion.text
        return result
