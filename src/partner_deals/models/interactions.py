"""UI-neutral shapes of chat interactions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class InteractionKind(str, Enum):
    CLAIM = "claim"
    OFFER = "offer"


@dataclass(frozen=True)
class PromptInput:
    custom_id: str
    label: str
    placeholder: str = ""
    required: bool = True


@dataclass(frozen=True)
class Prompt:
    """A short-text form to collect from the user (a modal on Discord)."""

    custom_id: str
    title: str
    inputs: tuple[PromptInput, ...] = ()


@dataclass(frozen=True)
class ButtonPress:
    custom_id: str
    channel_id: int
    message_id: str
    has_card: bool


@dataclass(frozen=True)
class Submission:
    """A submitted prompt."""

    custom_id: str
    channel_id: int
    values: dict[str, str] = field(default_factory=dict)

    def value(self, key: str) -> str:
        return (self.values.get(key) or "").strip()
