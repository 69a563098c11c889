"""Speech input and output for the debate coach."""

from .base import SpeechRecognizer, SpeechSynthesizer
from .controls import SpeechInput, SpeechPlayback
from .text_cleaning import clean_text_for_speech

__all__ = [
    "SpeechRecognizer",
    "SpeechSynthesizer",
    "SpeechInput",
    "SpeechPlayback",
    "clean_text_for_speech",
]
