"""
Input schemas and prompt vocabulary for Claude actions.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationInfo, field_validator

DEFAULT_MODEL = "claude-sonnet-4-5"

LANGUAGES = {
    "auto": "Auto-detect",
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "pt-BR": "Portuguese (Brazilian)",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese (Simplified)",
    "zh-TW": "Chinese (Traditional)",
    "ar": "Arabic",
    "hi": "Hindi",
    "nl": "Dutch",
    "pl": "Polish",
    "sv": "Swedish",
    "tr": "Turkish",
    "uk": "Ukrainian",
    "vi": "Vietnamese",
    "th": "Thai",
    "id": "Indonesian",
    "he": "Hebrew",
}


def language_name(code: str) -> str:
    return LANGUAGES.get(code, code)


class SummaryStyle(str, Enum):
    EXECUTIVE = "executive"
    BULLETS = "bullets"
    ABSTRACT = "abstract"
    SIMPLE = "simple"
    TECHNICAL = "technical"

    @property
    def instruction(self) -> str:
        return {
            SummaryStyle.EXECUTIVE: " as an executive summary focusing on key business insights",
            SummaryStyle.BULLETS: " as clear bullet points",
            SummaryStyle.ABSTRACT: " as an academic abstract",
            SummaryStyle.SIMPLE: " in simple, easy-to-understand language",
            SummaryStyle.TECHNICAL: " preserving technical details and terminology",
        }[self]


class SummaryLength(str, Enum):
    BRIEF = "brief"
    MODERATE = "moderate"
    DETAILED = "detailed"

    @property
    def instruction(self) -> str:
        return {
            SummaryLength.BRIEF: " in 1-2 paragraphs",
            SummaryLength.MODERATE: " in 3-4 paragraphs",
            SummaryLength.DETAILED: " in 5 or more paragraphs with comprehensive detail",
        }[self]


class Formality(str, Enum):
    AUTO = "auto"
    FORMAL = "formal"
    INFORMAL = "informal"
    BUSINESS = "business"
    CASUAL = "casual"
    ACADEMIC = "academic"

    @property
    def instruction(self) -> str:
        return {
            Formality.AUTO: "",
            Formality.FORMAL: " Use formal language and appropriate honorifics.",
            Formality.INFORMAL: " Use informal, conversational language.",
            Formality.BUSINESS: " Use professional business language.",
            Formality.CASUAL: " Use casual, friendly language.",
            Formality.ACADEMIC: " Use academic language suitable for scholarly work.",
        }[self]


# =============================================================================
# Completion
# =============================================================================


@dataclass(frozen=True, slots=True)
class Completion:
    """Text and accounting from one Messages API call."""

    text: str
    model: str
    stop_reason: str | None
    input_tokens: int
    output_tokens: int

    @property
    def usage(self) -> dict[str, int]:
        return {
            "input_tokens": self.input_tokens,
            "output_tokens": self.output_tokens,
            "total_tokens": self.input_tokens + self.output_tokens,
        }


# =============================================================================
# Action Inputs
# =============================================================================


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


class ChatProps(BaseModel):
    model: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    system: str | None = None
    temperature: float = Field(0.7, ge=0, le=1)
    max_tokens: int = Field(1024, ge=1)

    @field_validator("temperature", "max_tokens", mode="before")
    @classmethod
    def apply_defaults(cls, value: Any, info: ValidationInfo) -> Any:
        # max_tokens of 0 means "not set"; a temperature of 0 is valid
        if _is_blank(value) or (info.field_name == "max_tokens" and value == 0):
            return cls.model_fields[info.field_name].default
        return value


class SummarizeProps(BaseModel):
    model: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    style: SummaryStyle | None = None
    max_length: SummaryLength | None = None

    @field_validator("style", "max_length", mode="before")
    @classmethod
    def empty_choice(cls, value: Any) -> Any:
        return None if value == "" else value

    def prompt(self) -> str:
        prompt = "Summarize the following text"
        if self.style is not None:
            prompt += self.style.instruction
        if self.max_length is not None:
            prompt += self.max_length.instruction
        return f"{prompt}:\n\n{self.text}"


class TranslateProps(BaseModel):
    model: str = Field(..., min_length=1)
    text: str = Field(..., min_length=1)
    target_lang: str = Field(..., min_length=1)
    source_lang: str = "auto"
    formality: Formality = Formality.AUTO
    preserve_tone: bool = False
    temperature: float = Field(0.3, ge=0, le=1)

    @field_validator("source_lang", "formality", "temperature", mode="before")
    @classmethod
    def apply_defaults(cls, value: Any, info: ValidationInfo) -> Any:
        if _is_blank(value):
            return cls.model_fields[info.field_name].default
        return value

    def prompt(self) -> str:
        target = language_name(self.target_lang)
        if self.source_lang == "auto":
            prompt = f"Translate the following text to {target}."
        else:
            prompt = f"Translate the following {language_name(self.source_lang)} text to {target}."
        prompt += self.formality.instruction
        if self.preserve_tone:
            prompt += " Preserve the original tone, style, and emotional content of the text."
        return (
            f"{prompt}\n\nText to translate:\n{self.text}\n\n"
            "Provide your response as a JSON object with the keys translated_text, "
            "detected_language, alternative and notes."
        )
