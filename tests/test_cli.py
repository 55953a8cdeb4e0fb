"""Tests for the CLI and REPL."""

from typer.testing import CliRunner

from binbot.cli import REPL, app

from conftest import FakeLLM, tool_response

runner = CliRunner()


def test_missing_api_key_refuses_to_start(monkeypatch, temp_dir):
    """Test startup fails without a credential."""
    monkeypatch.chdir(temp_dir)
    monkeypatch.setenv("ANTHROPIC_API_KEY", "")

    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert "ANTHROPIC_API_KEY" in result.output


def test_repl_sends_natural_language(mock_config):
    """Test plain input goes through the controller."""
    repl = REPL(mock_config)
    repl.controller.interpreter.llm = FakeLLM([
        tool_response("record_action", {"action": "CREATE_CONTAINER", "items": ["Skis"]}),
    ])

    repl.handle_input("make a new container for skis")

    assert repl.controller.store.find(3).items == ["Skis"]
    assert repl.shown == len(repl.controller.messages)


def test_repl_scan_command(mock_config, temp_dir):
    """Test /scan reads the image file and sets a pending scan."""
    image_path = temp_dir / "bin.jpg"
    image_path.write_bytes(b"\xff\xd8jpeg")
    repl = REPL(mock_config)
    image_llm = FakeLLM([tool_response("record_items", {"items": ["Remote"]})])
    repl.controller.image_interpreter.llm = image_llm

    repl.handle_command(f"/scan 2 {image_path}")

    assert repl.controller.pending_scan.container_id == 2
    assert len(image_llm.calls) == 1


def test_repl_scan_usage(mock_config):
    """Test malformed /scan arguments make no request."""
    repl = REPL(mock_config)
    image_llm = FakeLLM()
    repl.controller.image_interpreter.llm = image_llm

    repl.handle_command("/scan two")

    assert image_llm.calls == []
    assert repl.controller.pending_scan is None


def test_repl_quit(mock_config):
    """Test /quit stops the loop."""
    repl = REPL(mock_config)

    repl.handle_command("/quit")

    assert not repl.running
