"""CLI and REPL for binbot."""

import asyncio
import mimetypes
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from binbot.config import Config
from binbot.constants import SEED_CONTAINERS
from binbot.conversation import ConversationController
from binbot.intent import IntentInterpreter
from binbot.llm import LLM
from binbot.models import Message
from binbot.speech import build_speech
from binbot.tools.store import ContainerStore
from binbot.utils.logging import SessionLogger
from binbot.vision import ImageInterpreter

app = typer.Typer(help="binbot - Chat assistant for your storage containers")
console = Console()

SENDER_STYLES = {
    "ai": ("AI", "cyan"),
    "system": ("System", "red"),
    "user": ("You", "blue"),
}


def build_controller(config: Config, logger: Optional[SessionLogger] = None) -> ConversationController:
    """Wire a conversation controller from configuration.

    Raises:
        ValueError: If the model is unsupported or the API key is missing
    """
    llm = LLM(LLM.parse_model_string(config.default_model), config.anthropic_api_key)
    store = ContainerStore(SEED_CONTAINERS if config.seed_containers else None)
    return ConversationController(
        IntentInterpreter(llm),
        ImageInterpreter(llm),
        store=store,
        speech=build_speech(config.speech_enabled),
        speech_enabled=config.speech_enabled,
        session_logger=logger,
    )


class REPL:
    """Interactive REPL for binbot."""

    def __init__(self, config: Config):
        """Initialize REPL.

        Args:
            config: Configuration object
        """
        self.config = config
        self.logger = SessionLogger(config.log_dir)
        self.controller = build_controller(config, self.logger)
        self.shown = 0
        self.running = True

    def start(self) -> None:
        """Start the REPL."""
        console.print(Panel.fit(
            "[bold cyan]binbot[/bold cyan] - Container Assistant\n"
            f"Model: {self.config.default_model}\n"
            "\n"
            "Type /help for commands or /quit to exit",
            border_style="cyan"
        ))

        self.controller.start()
        self.show_containers()
        self.show_new_messages()

        # Main REPL loop
        while self.running:
            try:
                prompt = "items to add" if self.controller.pending_scan else "binbot"
                user_input = console.input(f"[bold cyan]{prompt}>[/bold cyan] ").strip()

                if not user_input:
                    continue

                self.handle_input(user_input)

            except KeyboardInterrupt:
                console.print("\n[dim]Use /quit to exit[/dim]")
                continue
            except EOFError:
                break

        self.controller.speech.close()
        console.print("\n[cyan]Goodbye![/cyan]")

    def handle_input(self, user_input: str) -> None:
        """Handle user input (command or natural language).

        Args:
            user_input: User input string
        """
        if user_input.startswith("/"):
            self.handle_command(user_input)
        else:
            before = self.controller.containers
            with console.status("[dim]Thinking...[/dim]"):
                asyncio.run(self.controller.send_message(user_input))
            self.show_new_messages(skip_user=True)
            if self.controller.containers != before:
                self.show_containers()

    def handle_command(self, command: str) -> None:
        """Handle slash command.

        Args:
            command: Command string (starting with /)
        """
        parts = command.split(maxsplit=1)
        cmd = parts[0].lower()
        args = parts[1] if len(parts) > 1 else ""

        if cmd == "/help":
            self.show_help()
        elif cmd == "/quit" or cmd == "/exit":
            self.running = False
        elif cmd == "/containers":
            self.show_containers()
        elif cmd == "/scan":
            self.handle_scan(args)
        elif cmd == "/speech":
            self.handle_speech(args)
        elif cmd == "/model":
            if args:
                try:
                    descriptor = LLM.parse_model_string(args)
                    llm = LLM(descriptor, self.config.anthropic_api_key)
                    self.controller.interpreter.llm = llm
                    self.controller.image_interpreter.llm = llm
                    self.config.default_model = args
                    console.print(f"[green]Switched to model: {args}[/green]")
                except ValueError as e:
                    console.print(f"[red]{e}[/red]")
            else:
                console.print(f"[dim]Current model: {self.config.default_model}[/dim]")
                console.print("\nAvailable models:")
                for model in LLM.list_models():
                    console.print(f"  - {model}")
        elif cmd == "/config":
            config_dict = self.config.to_dict()
            console.print(Panel(
                "\n".join(f"{k}: {v}" for k, v in config_dict.items()),
                title="Configuration",
                border_style="blue"
            ))
        elif cmd == "/log":
            console.print(f"[dim]Session logs: {self.logger.get_log_path()}[/dim]")
        else:
            console.print(f"[red]Unknown command: {cmd}[/red]")
            console.print("[dim]Type /help for available commands[/dim]")

    def handle_scan(self, args: str) -> None:
        """Scan an image file of a container's contents.

        Args:
            args: "<container> <image-path>"
        """
        parts = args.split(maxsplit=1)
        if len(parts) != 2 or not parts[0].lstrip("#").isdigit():
            console.print("[red]Usage: /scan <container> <image-path>[/red]")
            return

        container_id = int(parts[0].lstrip("#"))
        image_path = Path(parts[1]).expanduser()
        try:
            image = image_path.read_bytes()
        except OSError as e:
            console.print(f"[red]Could not read image: {e}[/red]")
            return

        media_type = mimetypes.guess_type(image_path.name)[0] or "image/jpeg"
        with console.status(f"[dim]Scanning container #{container_id}...[/dim]"):
            asyncio.run(self.controller.scan(image, container_id, media_type))
        self.show_new_messages()

    def handle_speech(self, args: str) -> None:
        if not self.controller.speech.supported:
            console.print("[yellow]Speech output is not available. Set BINBOT_SPEECH=true "
                          "and install the speech extra.[/yellow]")
            return
        wanted = args.lower()
        if wanted in ("on", "off") and (wanted == "on") != self.controller.speech_enabled:
            self.controller.toggle_speech()
        elif not wanted:
            self.controller.toggle_speech()
        state = "enabled" if self.controller.speech_enabled else "disabled"
        console.print(f"[dim]Speech output {state}[/dim]")

    def show_new_messages(self, skip_user: bool = False) -> None:
        """Print transcript messages added since the last call."""
        for message in self.controller.messages[self.shown:]:
            if skip_user and message.sender == "user":
                continue
            self.print_message(message)
        self.shown = len(self.controller.messages)

    def print_message(self, message: Message) -> None:
        title, style = SENDER_STYLES[message.sender]
        console.print(Panel(Text(message.text), title=title, border_style=style, title_align="left"))

    def show_containers(self) -> None:
        """Render the container list."""
        containers = self.controller.containers
        if not containers:
            console.print("[dim]No containers found. Ask me to \"create a new container\" "
                          "to get started![/dim]")
            return

        table = Table(title="My Containers", border_style="cyan")
        table.add_column("#", justify="right", style="bold")
        table.add_column("Items")
        for container in containers:
            items = Text(", ".join(container.items)) if container.items else Text("Empty", style="dim")
            table.add_row(str(container.id), items)
        console.print(table)

    def show_help(self) -> None:
        """Show help message."""
        help_text = """
**Available Commands:**

- `/containers` - Show all containers and their items
- `/scan <container> <image-path>` - Identify items in a photo of a container
- `/speech [on|off]` - Toggle spoken replies
- `/model [name]` - Show or switch LLM model
- `/config` - Show current configuration
- `/log` - Show session log path
- `/help` - Show this help message
- `/quit` - Exit binbot

Anything else is treated as a request about your containers.

**Examples:**

```
What's in container 1?
Add skis to container 1
In container 2, add sleeping bags and remove the tent
Make a new container for winter clothes
/scan 2 ~/Pictures/bin2.jpg
```
        """
        console.print(Markdown(help_text))


@app.command()
def main(
    model: Optional[str] = typer.Option(
        None,
        "--model", "-m",
        help="Model to use (e.g., anthropic:claude-haiku-4-5)"
    ),
    speech: Optional[bool] = typer.Option(
        None,
        "--speech/--no-speech",
        help="Speak replies aloud"
    ),
) -> None:
    """Start a binbot chat session."""
    # Load configuration
    try:
        config = Config.load()
    except Exception as e:
        console.print(f"[red]Error loading configuration: {e}[/red]")
        sys.exit(1)

    if model:
        config.default_model = model
    if speech is not None:
        config.speech_enabled = speech

    # Validate configuration
    errors = config.validate()
    if errors:
        console.print("[red]Configuration errors:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        sys.exit(1)

    # Start REPL
    try:
        repl = REPL(config)
        repl.start()
    except Exception as e:
        console.print(f"[red]Fatal error: {e}[/red]")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    app()
