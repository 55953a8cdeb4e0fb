"""Session logging utilities."""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Optional


class SessionLogger:
    """Writes a binbot session's transcript and actions to disk."""

    def __init__(self, log_root: Path, run_id: Optional[str] = None):
        """Initialize session logger.

        Args:
            log_root: Root log directory (runs are created below it)
            run_id: Optional run ID (generated if not provided)
        """
        self.log_root = log_root
        self.run_id = run_id or datetime.now().strftime("%Y%m%d_%H%M%S")

        # Create logs directory
        self.log_dir = log_root / "runs" / self.run_id
        self.log_dir.mkdir(parents=True, exist_ok=True)

        # Log files
        self.transcript_path = self.log_dir / "transcript.ndjson"
        self.actions_path = self.log_dir / "actions.ndjson"

    def log_message(self, sender: str, text: str, message_id: Optional[str] = None) -> None:
        """Log a transcript message.

        Args:
            sender: Message sender (user, ai, system)
            text: Message text
            message_id: Optional transcript message id
        """
        entry: dict[str, Any] = {
            "ts": datetime.now().isoformat(),
            "sender": sender,
            "text": text,
        }

        if message_id:
            entry["id"] = message_id

        self._append(self.transcript_path, entry)

    def log_action(self, command: str, action: dict, response: str) -> None:
        """Log an executed action.

        Args:
            command: Command the action was interpreted from
            action: Action as a JSON-compatible dict
            response: Reply produced for the user
        """
        self._append(
            self.actions_path,
            {
                "ts": datetime.now().isoformat(),
                "command": command,
                "action": action,
                "response": response,
            },
        )

    def get_log_path(self) -> str:
        """Get the path to the log directory.

        Returns:
            Absolute path to log directory
        """
        return str(self.log_dir.absolute())

    def _append(self, path: Path, entry: dict) -> None:
        with open(path, "a") as f:
            f.write(json.dumps(entry) + "\n")
