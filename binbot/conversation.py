"""Conversation turn handling."""

import asyncio
import logging
from typing import Any, Optional

from binbot.constants import (
    LOADING_TEXT,
    SCAN_ERROR_TEXT,
    SEED_CONTAINERS,
    TURN_ERROR_TEXT,
    WELCOME_MESSAGE,
)
from binbot.graph import TurnGraph
from binbot.intent import IntentInterpreter
from binbot.models import Container, Message, PendingScan, Sender
from binbot.speech import SilentSpeech, SpeechOutput
from binbot.tools.executor import ActionExecutor
from binbot.tools.store import ContainerStore
from binbot.utils.logging import SessionLogger
from binbot.vision import ImageInterpreter

logger = logging.getLogger(__name__)


class ConversationController:
    """Owns a session's containers, transcript and pending scan.

    One turn (a command or a scan) is in flight at a time; requests made
    while one is outstanding are ignored rather than queued.
    """

    def __init__(
        self,
        interpreter: IntentInterpreter,
        image_interpreter: ImageInterpreter,
        store: Optional[ContainerStore] = None,
        speech: Optional[SpeechOutput] = None,
        speech_enabled: bool = True,
        session_logger: Optional[SessionLogger] = None,
    ):
        """Initialize conversation controller.

        Args:
            interpreter: Turns commands into actions
            image_interpreter: Identifies items in scanned images
            store: Container store (seeded with demo bins if omitted)
            speech: Speech output backend
            speech_enabled: Whether replies are spoken
            session_logger: Optional logger for transcript and actions
        """
        self.store = store if store is not None else ContainerStore(SEED_CONTAINERS)
        self.interpreter = interpreter
        self.image_interpreter = image_interpreter
        self.speech = speech or SilentSpeech()
        self.speech_enabled = speech_enabled
        self.session_logger = session_logger
        self.graph = TurnGraph(interpreter, ActionExecutor(self.store))

        self.messages: list[Message] = []
        self.pending_scan: Optional[PendingScan] = None
        self.is_processing = False
        self._scan_generation = 0

    @property
    def containers(self) -> list[Container]:
        return self.store.snapshot()

    def start(self) -> Message:
        """Post the welcome message."""
        welcome = Message(id="welcome", sender="ai", text=WELCOME_MESSAGE)
        self.messages.append(welcome)
        self._record(welcome)
        self._speak(welcome.text)
        return welcome

    def toggle_speech(self) -> bool:
        """Flip spoken replies on or off. Returns the new setting."""
        if self.speech_enabled:
            self._cancel_speech()
        self.speech_enabled = not self.speech_enabled
        return self.speech_enabled

    async def send_message(self, text: str) -> bool:
        """Handle one user command.

        Args:
            text: The user's command

        Returns:
            False if the command was ignored (blank, or a turn is in flight)
        """
        if not text.strip() or self.is_processing:
            return False

        self._cancel_speech()
        user_message = Message(sender="user", text=text)
        placeholder = Message(sender="ai", text=LOADING_TEXT, is_loading=True)
        self.messages.extend([user_message, placeholder])
        self._record(user_message)
        self.is_processing = True

        # A pending scan only applies to the very next command
        pending, self.pending_scan = self.pending_scan, None

        action = None
        try:
            result = await self.graph.run(text, self.store.snapshot(), pending)
            action, sender, reply = result["action"], "ai", result["response"]
        except Exception:
            logger.exception("Error handling command %r", text)
            sender, reply = "system", TURN_ERROR_TEXT
        finally:
            self.is_processing = False

        self._resolve(placeholder, sender, reply)
        self._record_action(text, action, reply)

        return True

    async def scan(
        self,
        image: bytes,
        container_id: int,
        media_type: str = "image/jpeg",
    ) -> bool:
        """Identify items in a photo of a container.

        Found items become the pending scan; the store is only changed once
        the user's next command selects among them.

        Args:
            image: Encoded image bytes
            container_id: Container the photo shows
            media_type: MIME type of the image

        Returns:
            False if the scan was ignored or the container does not exist
        """
        if self.is_processing:
            return False

        if self.store.find(container_id) is None:
            reply = Message(
                sender="ai", text=f"Sorry, I couldn't find container #{container_id} to scan."
            )
            self.messages.append(reply)
            self._record(reply)
            self._speak(reply.text)
            return False

        self._cancel_speech()
        placeholder = Message(
            sender="system", text=f"Scanning container #{container_id}...", is_loading=True
        )
        self.messages.append(placeholder)
        self.is_processing = True
        self._scan_generation += 1
        generation = self._scan_generation

        try:
            items = await asyncio.to_thread(self.image_interpreter.analyze, image, media_type)
            if generation != self._scan_generation:
                sender, reply = "system", f"Scan of container #{container_id} was cancelled."
            elif items:
                self.pending_scan = PendingScan(container_id=container_id, items=items)
                sender, reply = (
                    "ai",
                    f"I scanned container #{container_id} and found these items: "
                    f"{', '.join(items)}. Which of these should I add?",
                )
            else:
                sender, reply = (
                    "ai",
                    f"I couldn't identify any distinct items in container #{container_id}, "
                    "so I left it as is.",
                )
        except Exception:
            logger.exception("Error scanning container #%s", container_id)
            sender, reply = "system", SCAN_ERROR_TEXT
        finally:
            self.is_processing = False

        self._resolve(placeholder, sender, reply)

        return True

    def dismiss_scan(self) -> None:
        """Discard the result of any scan still in flight."""
        self._scan_generation += 1

    def _resolve(self, placeholder: Message, sender: Sender, text: str) -> None:
        """Replace a loading placeholder in place with the final message."""
        final = Message(sender=sender, text=text)
        for i, message in enumerate(self.messages):
            if message.id == placeholder.id:
                self.messages[i] = final
                break
        else:
            self.messages.append(final)
        self._record(final)
        self._speak(final.text)

    # Logging and speech failures never change the transcript or escape a turn.

    def _record(self, message: Message) -> None:
        if not self.session_logger:
            return
        try:
            self.session_logger.log_message(message.sender, message.text, message.id)
        except OSError:
            logger.exception("Could not write transcript entry")

    def _record_action(self, command: str, action: Any, response: str) -> None:
        if not self.session_logger or action is None:
            return
        try:
            self.session_logger.log_action(command, action.model_dump(by_alias=True), response)
        except OSError:
            logger.exception("Could not write action entry")

    def _speak(self, text: str) -> None:
        if not (self.speech_enabled and self.speech.supported):
            return
        try:
            self.speech.speak(text)
        except Exception:
            logger.exception("Speech output failed")

    def _cancel_speech(self) -> None:
        if not (self.speech_enabled and self.speech.supported):
            return
        try:
            self.speech.cancel()
        except Exception:
            logger.exception("Speech cancel failed")
