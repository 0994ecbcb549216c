"""
Pytest configuration and fixtures for actiongate tests.
"""

import tempfile
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any, Optional

import pytest
import yaml
from typer.testing import CliRunner

from actiongate.actions.models import DispatchResult, ProviderActionRequest
from actiongate.actions.session import SessionContext
from actiongate.config import Config, clear_config_cache
from actiongate.outbound.models import OutboundResult, SendMessageRequest, SendPollRequest
from actiongate.outbound.transport import OutboundTransport


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def mock_actiongate_home(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> Generator[Path, None, None]:
    """Point ACTIONGATE_HOME at an empty directory and run from a clean cwd."""
    home = temp_dir / ".actiongate"
    home.mkdir()
    workdir = temp_dir / "work"
    workdir.mkdir()

    monkeypatch.setenv("ACTIONGATE_HOME", str(home))
    monkeypatch.chdir(workdir)
    clear_config_cache()
    yield home
    clear_config_cache()


@pytest.fixture
def write_global_config(mock_actiongate_home: Path) -> Callable[[dict], Path]:
    """Write a global config.yaml into the mock home."""

    def write(data: dict) -> Path:
        path = mock_actiongate_home / "config.yaml"
        path.write_text(yaml.safe_dump(data))
        clear_config_cache()
        return path

    return write


def make_config(**platforms: dict) -> Config:
    """Build a Config with the given platform sections."""
    return Config.model_validate({"platforms": platforms})


@pytest.fixture
def discord_config() -> Config:
    """Discord enabled with a bot token and default gates."""
    return make_config(discord={"enable": True, "bot_token": "discord-token"})


@pytest.fixture
def slack_config() -> Config:
    """Slack enabled with a bot token and default gates."""
    return make_config(slack={"enable": True, "bot_token": "xoxb-slack"})


@pytest.fixture
def multi_config() -> Config:
    """Discord and Slack both enabled."""
    return make_config(
        discord={"enable": True, "bot_token": "discord-token"},
        slack={"enable": True, "bot_token": "xoxb-slack"},
    )


class RecordingHandler:
    """Provider action handler that records every call."""

    def __init__(self, result: Any = None, error: Optional[BaseException] = None):
        self.calls: list[tuple[ProviderActionRequest, Config, Optional[SessionContext]]] = []
        self.result = result if result is not None else {"ok": True}
        self.error = error

    async def __call__(
        self,
        request: ProviderActionRequest,
        config: Config,
        session: Optional[SessionContext],
    ) -> Any:
        self.calls.append((request, config, session))
        if self.error is not None:
            raise self.error
        return self.result

    @property
    def requests(self) -> list[ProviderActionRequest]:
        return [call[0] for call in self.calls]


class RecordingOutbound(OutboundTransport):
    """Outbound transport that records requests instead of delivering them."""

    def __init__(self, error: Optional[BaseException] = None):
        self.messages: list[SendMessageRequest] = []
        self.polls: list[SendPollRequest] = []
        self.error = error

    async def send_message(self, request: SendMessageRequest) -> OutboundResult:
        self.messages.append(request)
        if self.error is not None:
            raise self.error
        return OutboundResult(
            ok=True,
            id="m-1",
            provider=request.provider,
            to=request.to,
            dry_run=request.dry_run,
        )

    async def send_poll(self, request: SendPollRequest) -> OutboundResult:
        self.polls.append(request)
        if self.error is not None:
            raise self.error
        return OutboundResult(
            ok=True,
            id="p-1",
            provider=request.provider,
            to=request.to,
            dry_run=request.dry_run,
        )

    @property
    def call_count(self) -> int:
        return len(self.messages) + len(self.polls)


@pytest.fixture
def recording_outbound() -> RecordingOutbound:
    """Provide an outbound transport that records calls."""
    return RecordingOutbound()


@pytest.fixture
def dispatch_result() -> DispatchResult:
    """A handler-built dispatch result."""
    return DispatchResult(data={"messageId": "123"})


@pytest.fixture
def recording_handler() -> RecordingHandler:
    """Provide a provider action handler that records calls."""
    return RecordingHandler()


@pytest.fixture(name="make_config")
def make_config_fixture() -> Callable[..., Config]:
    """Provide the make_config factory."""
    return make_config
