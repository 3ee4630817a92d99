from pathlib import Path

import pytest

from sitedeploy.config import DeploySettings
from sitedeploy.orchestrator import Deployer
from sitedeploy.shell import CommandResult


class FakeRunner:
    """Records commands instead of running them."""

    def __init__(
        self,
        version="aws-cli/1.29.0 Python/3.11.4 Linux/6.1 botocore/1.31.0",
        version_stream="stdout",
        version_code=0,
        tools=("aws", "npm"),
        access=True,
        build_code=0,
        sync_code=0,
        build_output=True,
    ):
        self.version = version
        self.version_stream = version_stream
        self.version_code = version_code
        self.tools = set(tools)
        self.access = access
        self.build_code = build_code
        self.sync_code = sync_code
        self.build_output = build_output
        self.calls = []

    def which(self, name):
        return f"/usr/bin/{name}" if name in self.tools else None

    def capture(self, cmd, cwd=None, env=None):
        cmd = list(cmd)
        if cmd[1] == "--version":
            self.calls.append(("version", cmd, env))
            if self.version_stream == "stderr":
                return CommandResult(self.version_code, "", self.version)
            return CommandResult(self.version_code, self.version, "")
        if cmd[1:3] == ["s3", "ls"]:
            self.calls.append(("ls", cmd, env))
            if isinstance(self.access, Exception):
                raise self.access
            if self.access:
                return CommandResult(0, "PRE posts/\n", "")
            return CommandResult(255, "", "An error occurred (AccessDenied)")
        raise AssertionError(f"unexpected captured command {cmd}")

    def stream(self, cmd, cwd=None):
        cmd = list(cmd)
        if cmd[0] == "npm":
            self.calls.append(("build", cmd, cwd))
            if isinstance(self.build_code, BaseException):
                raise self.build_code
            if self.build_output:
                (Path(cwd) / "public").mkdir(exist_ok=True)
            return self.build_code
        if cmd[1:3] == ["s3", "sync"]:
            self.calls.append(("sync", cmd, cwd))
            if isinstance(self.sync_code, BaseException):
                raise self.sync_code
            return self.sync_code
        raise AssertionError(f"unexpected streamed command {cmd}")

    @property
    def kinds(self):
        return [kind for kind, *_ in self.calls]


class FakePrompter:
    def __init__(self, answer=True):
        self.answer = answer
        self.messages = []

    def confirm(self, message, default=True):
        self.messages.append((message, default))
        return self.answer


class FakeInvalidator:
    def __init__(self, error=None):
        self.error = error
        self.requests = []

    def submit(self, request):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return f"I{len(self.requests)}"


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def fake_prompter():
    return FakePrompter()


@pytest.fixture
def fake_invalidator():
    return FakeInvalidator()


@pytest.fixture
def make_deployer(tmp_path, fake_runner, fake_prompter, fake_invalidator):
    """Build a Deployer wired to fakes; keyword arguments override them."""

    def factory(**overrides):
        messages = []
        states = []
        kwargs = {
            "settings": DeploySettings(),
            "project_root": tmp_path,
            "runner": fake_runner,
            "prompter": fake_prompter,
            "invalidator": fake_invalidator,
            "environ": {"AWS_PROFILE": "blog", "PATH": "/usr/bin"},
            "echo": messages.append,
            "on_state": states.append,
        }
        kwargs.update(overrides)
        deployer = Deployer(**kwargs)
        deployer.messages = messages
        deployer.states = states
        return deployer

    return factory


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances with non-default behaviour."""
    return FakeRunner


@pytest.fixture
def make_prompter():
    return FakePrompter


@pytest.fixture
def make_invalidator():
    return FakeInvalidator
