"""Test doubles shared by the test modules."""

import asyncio
from typing import TYPE_CHECKING

from coach_engine.types import GenerationMode
from models.providers.base_model_provider import BaseModelProvider
from speech.base import SpeechRecognizer, SpeechSynthesizer

if TYPE_CHECKING:
    from config.settings import ModelConfig, SpeechConfig, SystemConfig
    from coach_engine.types import TranscriptCallback


class BlockedReply:
    """A scripted reply that is only returned once release() is called."""

    def __init__(self, text: str):
        self.text = text
        self._released = asyncio.Event()

    def release(self) -> None:
        self._released.set()

    async def wait(self) -> str:
        await self._released.wait()
        return self.text


class FakeGenerator:
    """Scripted generation service.

    Each call pops the next item: a string is returned, an exception is
    raised and a BlockedReply waits until released.
    """

    def __init__(self, *responses: "str | Exception | BlockedReply"):
        self._responses = list(responses)
        self.requests: list[tuple[str, GenerationMode, bool]] = []

    async def generate(
        self, prompt: str, mode: GenerationMode, grounding_enabled: bool = False
    ) -> str:
        self.requests.append((prompt, mode, grounding_enabled))
        if not self._responses:
            raise AssertionError("No fake responses left")
        item = self._responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, BlockedReply):
            return await item.wait()
        return item


class FakeProvider(BaseModelProvider):
    """In-memory model provider recording every request."""

    def __init__(
        self,
        system_config: "SystemConfig",
        name: str,
        *replies: "str | Exception",
        web_search: bool = False,
    ):
        super().__init__(system_config)
        self._name = name
        self._replies = list(replies)
        self._web_search = web_search
        self.calls: list[tuple[str, list[dict[str, str]], dict]] = []

    @property
    def provider_name(self) -> str:
        return self._name

    async def get_available_models(self) -> list[str]:
        return [f"{self._name}-model"]

    async def generate_response(
        self, model_config: "ModelConfig", messages: list[dict[str, str]], **overrides
    ) -> str:
        self.calls.append((model_config.name, messages, overrides))
        if not self._replies:
            raise AssertionError("No fake replies left")
        item = self._replies.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def validate_model_config(self, model_config: "ModelConfig") -> bool:
        return model_config.provider == self._name

    def supports_web_search(self) -> bool:
        return self._web_search


class RecordingSynthesizer(SpeechSynthesizer):
    """Synthesizer that only records what it was asked to do."""

    def __init__(self, speech_config: "SpeechConfig"):
        super().__init__(speech_config)
        self.events: list[tuple[str, str | None]] = []

    @property
    def spoken(self) -> list[str]:
        return [text for event, text in self.events if event == "speak" and text]

    async def speak(self, text: str) -> None:
        self.events.append(("speak", text))

    async def stop_speaking(self) -> None:
        self.events.append(("stop", None))


class ScriptedRecognizer(SpeechRecognizer):
    """Recognizer whose transcripts are pushed by the test."""

    def __init__(self, speech_config: "SpeechConfig"):
        super().__init__(speech_config)
        self.callback: "TranscriptCallback | None" = None
        self.stopped = 0

    async def start_listening(self, on_transcript: "TranscriptCallback") -> None:
        self.callback = on_transcript

    async def stop_listening(self) -> None:
        self.stopped += 1

    def hear(self, text: str) -> None:
        assert self.callback is not None
        self.callback(text)
