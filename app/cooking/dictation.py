# app/cooking/dictation.py
"""
Voice dictation of ingredients.

The speech engine belongs to the host (browser Web Speech API, a desktop
recogniser, ...). It is driven through `SpeechCapability` and reports back
by handing events to `DictationSession.handle`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Union

from core.log import json_log, summarize_exc


class SpeechCapability(Protocol):
    def start(self) -> None: ...

    def stop(self) -> None: ...


class DictationState(str, Enum):
    STOPPED = "stopped"
    LISTENING = "listening"


@dataclass(frozen=True)
class SessionStarted:
    pass


@dataclass(frozen=True)
class SessionEnded:
    pass


@dataclass(frozen=True)
class PartialResult:
    text: str


@dataclass(frozen=True)
class FinalResult:
    text: str


@dataclass(frozen=True)
class RecognitionError:
    reason: str


DictationEvent = Union[SessionStarted, SessionEnded, PartialResult, FinalResult, RecognitionError]


def append_transcript(existing: str, final: str) -> str:
    final = final.strip()
    if not final:
        return existing
    existing = (existing or "").rstrip()
    if existing:
        return f"{existing}, {final}"
    return final


class DictationSession:
    def __init__(self, capability: SpeechCapability, on_final: Callable[[str], None]):
        self.capability = capability
        self.on_final = on_final
        self.state = DictationState.STOPPED
        self.partial = ""

    @property
    def listening(self) -> bool:
        return self.state is DictationState.LISTENING

    def start(self) -> None:
        if self.listening:
            return
        try:
            self.capability.start()
        except Exception as e:
            json_log("warn", event="dictation_error", error=summarize_exc(e))
            self.state = DictationState.STOPPED
            self.partial = ""
            return
        self.state = DictationState.LISTENING
        json_log("info", event="dictation_started")

    def stop(self) -> None:
        # Safe in any state
        if self.listening:
            try:
                self.capability.stop()
            except Exception as e:
                json_log("warn", event="dictation_stop_failed", error=summarize_exc(e))
            json_log("info", event="dictation_stopped")
        self.state = DictationState.STOPPED
        self.partial = ""

    def handle(self, event: DictationEvent) -> None:
        if isinstance(event, SessionStarted):
            self.state = DictationState.LISTENING
        elif isinstance(event, SessionEnded):
            self.state = DictationState.STOPPED
            self.partial = ""
        elif isinstance(event, PartialResult):
            if self.listening:
                self.partial = event.text
        elif isinstance(event, FinalResult):
            self.partial = ""
            if event.text.strip():
                self.on_final(event.text)
        elif isinstance(event, RecognitionError):
            json_log("warn", event="dictation_error", reason=event.reason)
            self.stop()
        else:
            raise TypeError(f"Unknown dictation event: {event!r}")

    def __enter__(self) -> "DictationSession":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


def open_dictation(
        capability: Optional[SpeechCapability],
        on_final: Callable[[str], None],
) -> Optional[DictationSession]:
    """None when the host has no speech-to-text; callers hide the microphone button."""
    if capability is None:
        return None
    return DictationSession(capability, on_final)
