"""Speech output backends."""

import logging
import threading
from queue import Empty, Queue

logger = logging.getLogger(__name__)


class SpeechOutput:
    """Interface for text-to-speech playback.

    At most one utterance is active; speaking again cancels the current one.
    """

    supported: bool = False

    def speak(self, text: str) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release the backend when the session ends."""


class SilentSpeech(SpeechOutput):
    """No speech output available."""

    supported = False

    def speak(self, text: str) -> None:
        pass

    def cancel(self) -> None:
        pass


class Pyttsx3Speech(SpeechOutput):
    """Speaks through the local pyttsx3 engine.

    Requires the ``speech`` extra. Utterances play on a background thread so
    ``speak`` returns immediately; a new utterance stops the current one and
    drops any that are still queued.
    """

    supported = True

    def __init__(self, rate: int = 180):
        import pyttsx3

        self.engine = pyttsx3.init()
        self.engine.setProperty("rate", rate)
        self._queue: Queue = Queue()
        self._thread = threading.Thread(target=self._run, name="binbot-speech", daemon=True)
        self._thread.start()

    def speak(self, text: str) -> None:
        if not text:
            return
        self.cancel()
        self._queue.put(text)

    def cancel(self) -> None:
        self._drain()
        self.engine.stop()

    def close(self) -> None:
        """Stop playback and end the worker thread."""
        self.cancel()
        self._queue.put(None)
        self._thread.join(timeout=1)

    def _drain(self) -> None:
        while True:
            try:
                self._queue.get_nowait()
            except Empty:
                return
            self._queue.task_done()

    def _run(self) -> None:
        while True:
            text = self._queue.get()
            try:
                if text is None:
                    return
                self.engine.say(text)
                self.engine.runAndWait()
            except RuntimeError as e:
                logger.warning("Speech playback failed: %s", e)
            finally:
                self._queue.task_done()


def build_speech(enabled: bool) -> SpeechOutput:
    """Create the speech backend for a session.

    Falls back to silence when the local engine cannot start.
    """
    if not enabled:
        return SilentSpeech()
    try:
        return Pyttsx3Speech()
    except (ImportError, RuntimeError, OSError) as e:
        logger.warning("Speech output unavailable: %s", e)
        return SilentSpeech()
