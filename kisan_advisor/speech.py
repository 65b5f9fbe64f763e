"""Speech boundary: inbound transcripts and outbound synthesis.

Capture is modelled as a lazy stream of transcript events of which only
finalized segments reach the caller; each call to :meth:`AudioFileCapture.events`
starts a fresh listening session. Synthesis is a one-shot ``speak`` command.
The two sides share no state.
"""

import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Optional

import speech_recognition as sr
from gtts import gTTS

logger = logging.getLogger(__name__)

VOICE_CODES = {
    "hi": "hi-IN",
    "mr": "mr-IN",
    "gu": "gu-IN",
    "pa": "pa-IN",
}
DEFAULT_VOICE = "en-US"


def voice_code(locale: str) -> str:
    """Region-qualified voice tag for ``locale`` (``hi`` -> ``hi-IN``)."""
    return VOICE_CODES.get(locale, DEFAULT_VOICE)


@dataclass(frozen=True)
class TranscriptEvent:
    text: str
    is_final: bool


def finalized_transcripts(events: Iterable[TranscriptEvent]) -> Iterator[str]:
    """Yield the text of final, non-empty segments; interim results are dropped."""
    for event in events:
        if not event.is_final:
            continue
        text = event.text.strip()
        if text:
            yield text


class AudioFileCapture:
    """Transcribe an audio file chunk by chunk with ``speech_recognition``."""

    def __init__(
        self,
        path: str,
        locale: str,
        chunk_seconds: float = 15.0,
        recognizer: Optional["sr.Recognizer"] = None,
    ) -> None:
        self.path = path
        self.locale = locale
        self.chunk_seconds = chunk_seconds
        self.recognizer = recognizer or sr.Recognizer()

    def events(self) -> Iterator[TranscriptEvent]:
        language = voice_code(self.locale)
        with sr.AudioFile(self.path) as source:
            while True:
                audio = self.recognizer.record(source, duration=self.chunk_seconds)
                if not audio.frame_data:
                    return
                try:
                    text = self.recognizer.recognize_google(audio, language=language)
                except sr.UnknownValueError:
                    logger.debug("Skipping unintelligible audio chunk in %s", self.path)
                    continue
                except sr.RequestError as exc:
                    logger.error("Speech recognition service error: %s", exc)
                    return
                yield TranscriptEvent(text=text, is_final=True)

    def transcripts(self) -> Iterator[str]:
        return finalized_transcripts(self.events())


class SpeechSynthesizer(ABC):
    @abstractmethod
    def speak(self, text: str, locale: str) -> None:
        """Speak ``text``; fire-and-forget, failures are logged not raised."""


class GTTSSynthesizer(SpeechSynthesizer):
    """Render speech to MP3 with gTTS and hand the bytes to ``on_audio``."""

    def __init__(self, on_audio: Callable[[bytes, str], None]) -> None:
        self.on_audio = on_audio

    def speak(self, text: str, locale: str) -> None:
        if not text or not text.strip():
            return
        code = voice_code(locale)
        try:
            buffer = io.BytesIO()
            gTTS(text, lang=code.split("-")[0]).write_to_fp(buffer)
            self.on_audio(buffer.getvalue(), code)
        except Exception as exc:
            logger.error("Text-to-speech failed for %s: %s", code, exc)
