"""
Unit tests for the phonebook prompt commands and command line.
"""

import asyncio
import json
import time

import httpx
import pytest

from phonebook.src import main as cli
from phonebook.src.main import _build_parser, ask, handle_command, redraw_when_cleared
from phonebook.src.services.persons_client import PersonsClient
from phonebook.src.view import Notification, Notifier, PhonebookView


async def always_yes(question):
    return True


@pytest.fixture
def created():
    return []


@pytest.fixture
def persons_client(created):
    def handler(request):
        if request.method == "POST":
            body = json.loads(request.content)
            created.append(body)
            return httpx.Response(201, json={"id": "9", **body})
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json=[{"id": "1", "name": "Arto Hellas", "number": "040-123456"}])

    return PersonsClient("http://phonebook.test", transport=httpx.MockTransport(handler))


class TestHandleCommand:
    """Test parsing of prompt lines."""

    @pytest.mark.asyncio
    async def test_add_splits_number_from_multi_word_name(self, persons_client, created, capsys):
        view = PhonebookView(persons_client, Notifier(), confirm=always_yes)

        keep_going = await handle_command(view, "add Mary Poppendieck 39-23-6423122")

        assert keep_going is True
        assert created == [{"name": "Mary Poppendieck", "number": "39-23-6423122"}]
        assert "Added Mary Poppendieck" in capsys.readouterr().out
        view.notifier.clear()
        await persons_client.aclose()

    @pytest.mark.asyncio
    async def test_add_without_number_prints_usage(self, persons_client, created, capsys):
        view = PhonebookView(persons_client, Notifier(), confirm=always_yes)

        await handle_command(view, "add Mary")

        assert created == []
        assert "usage" in capsys.readouterr().out
        await persons_client.aclose()

    @pytest.mark.asyncio
    async def test_filter_and_list(self, persons_client, capsys):
        view = PhonebookView(persons_client, Notifier(), confirm=always_yes)

        await handle_command(view, "list")
        await handle_command(view, "filter arto")

        output = capsys.readouterr().out
        assert "filter shown with: arto" in output
        assert "Arto Hellas 040-123456" in output
        await persons_client.aclose()

    @pytest.mark.asyncio
    async def test_delete_unknown_name(self, persons_client, capsys):
        view = PhonebookView(persons_client, Notifier(), confirm=always_yes)

        await handle_command(view, "delete Nobody")

        assert "no entry named 'Nobody'" in capsys.readouterr().out
        await persons_client.aclose()

    @pytest.mark.asyncio
    async def test_quit_stops_the_loop(self, persons_client):
        view = PhonebookView(persons_client, Notifier(), confirm=always_yes)

        assert await handle_command(view, "quit") is False
        await persons_client.aclose()


class TestPrompts:
    """Test the yes/no prompt and the banner redraw."""

    @pytest.mark.asyncio
    async def test_ask_does_not_block_the_notification_timer(self, monkeypatch):
        """Test the banner clears while the user is still answering."""
        def slow_input(prompt):
            time.sleep(0.2)
            return "y"

        monkeypatch.setattr("builtins.input", slow_input)
        notifier = Notifier(duration=0.05)
        notifier.show("Deleted Ada Lovelace")

        assert await ask("Delete Arto Hellas?") is True
        assert notifier.current is None

    @pytest.mark.asyncio
    async def test_ask_defaults_to_no(self, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt: "")

        assert await ask("Delete Arto Hellas?") is False

    @pytest.mark.asyncio
    async def test_list_is_redrawn_when_banner_expires(self, persons_client, capsys):
        view = PhonebookView(persons_client, Notifier(duration=0.05), confirm=always_yes)
        view.notifier.subscribe(redraw_when_cleared(view))
        await view.load()

        view.notifier.show("Added Arto Hellas")
        assert capsys.readouterr().out == ""

        await asyncio.sleep(0.1)

        output = capsys.readouterr().out
        assert "Arto Hellas 040-123456" in output
        assert "Added Arto Hellas" not in output
        await persons_client.aclose()

    def test_redraw_ignores_new_banners(self, capsys):
        view = PhonebookView(client=None, notifier=Notifier(), confirm=always_yes)

        redraw_when_cleared(view)(Notification("Added Arto Hellas"))

        assert capsys.readouterr().out == ""


class TestArguments:
    """Test command line options."""

    def test_base_url_option(self):
        args = _build_parser().parse_args(["--base-url", "http://example.test"])

        assert args.base_url == "http://example.test"

    def test_notification_seconds_within_window(self):
        args = _build_parser().parse_args(["--notification-seconds", "4.2"])

        assert args.notification_seconds == 4.2

    @pytest.mark.parametrize("seconds", ["100", "3.4", "4.6", "soon"])
    def test_notification_seconds_outside_window_is_rejected(self, seconds, monkeypatch, capsys):
        started = []
        monkeypatch.setattr(cli, "run", lambda base_url, notification_seconds: started.append(notification_seconds))

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--notification-seconds", seconds])

        assert exc_info.value.code == 2
        assert started == []
        assert "between 3.5 and 4.5" in capsys.readouterr().err
