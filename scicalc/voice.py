"""Voice input for SciCalc.

Captures one phrase from the microphone with SpeechRecognition and maps
spoken operator words onto calculator symbols.
"""

import logging
import re
from typing import List, Optional, Tuple

import speech_recognition as sr

from .errors import CapabilityUnavailable, ServiceError

logger = logging.getLogger(__name__)

UNSUPPORTED_NOTICE = "Voice recognition not supported on this system."

# Applied in order to the lowercase transcript.
SPOKEN_WORDS: List[Tuple[re.Pattern, str]] = [
    (re.compile("plus"), "+"),
    (re.compile("minus"), "-"),
    (re.compile("times|into"), "*"),
    (re.compile("divided by|by"), "/"),
    (re.compile("modulus|mod"), "%"),
    (re.compile("pi"), "π"),
    (re.compile("square root of"), "√("),
    (re.compile("power"), "^"),
    (re.compile("factorial"), "!"),
]


def spoken_to_expression(transcript: str) -> str:
    """Map a spoken transcript onto display-grammar text.

    Example:
        >>> spoken_to_expression("2 plus 3 times 4")
        '2 + 3 * 4'
    """
    text = transcript.lower()
    for pattern, symbol in SPOKEN_WORDS:
        text = pattern.sub(symbol, text)
    return text


class SpeechListener:
    """One-shot speech-to-text session.

    Args:
        language: Recognition language tag.
        timeout: Seconds to wait for speech to start.
        recognizer: Optional recognizer (mainly for tests).
    """

    def __init__(
        self,
        language: str = "en-US",
        timeout: float = 5.0,
        recognizer: Optional[sr.Recognizer] = None,
    ):
        self.language = language
        self.timeout = timeout
        self.recognizer = recognizer or sr.Recognizer()

    def _microphone(self) -> sr.Microphone:
        try:
            return sr.Microphone()
        except (AttributeError, OSError) as e:
            # SpeechRecognition raises AttributeError when PyAudio is missing
            logger.warning("Microphone unavailable: %s", e)
            raise CapabilityUnavailable(UNSUPPORTED_NOTICE) from e

    def listen_once(self) -> str:
        """Record one phrase and return its lowercase transcript.

        Raises:
            CapabilityUnavailable: No microphone or audio backend.
            ServiceError: Speech was not understood or the service failed.
        """
        microphone = self._microphone()
        try:
            with microphone as source:
                audio = self.recognizer.listen(source, timeout=self.timeout)
            transcript = self.recognizer.recognize_google(audio, language=self.language)
        except sr.WaitTimeoutError as e:
            raise ServiceError("no speech detected") from e
        except sr.UnknownValueError as e:
            raise ServiceError("speech not understood") from e
        except sr.RequestError as e:
            raise ServiceError(str(e)) from e
        except OSError as e:
            raise CapabilityUnavailable(UNSUPPORTED_NOTICE) from e

        logger.debug("Voice transcript: %s", transcript)
        return transcript.lower()
