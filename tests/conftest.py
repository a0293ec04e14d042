"""Pytest configuration and shared fixtures."""

import json
import pytest
from pathlib import Path
from copilot.config import CopilotConfig
from copilot.llm.provider import AIProvider, ChatCompletion, ChatMessage, ChatRequest, Choice, Usage


class FakeClock:
    """Manually advanced time source for cache tests."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockAIProvider(AIProvider):
    """Provider returning a configurable completion and recording requests."""

    def __init__(self, content: str = "```js\nconst x = 1;\n```", finish_reason="stop", tokens=100):
        self.content = content
        self.finish_reason = finish_reason
        self.tokens = tokens
        self.error: Exception | None = None
        self.requests: list[ChatRequest] = []

    def generate(self, request: ChatRequest) -> ChatCompletion:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return ChatCompletion(
            choices=[
                Choice(
                    message=ChatMessage(role="assistant", content=self.content),
                    finish_reason=self.finish_reason,
                )
            ],
            usage=Usage(total_tokens=self.tokens),
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_provider() -> MockAIProvider:
    return MockAIProvider()


@pytest.fixture
def copilot_config() -> CopilotConfig:
    """Provide a test generation configuration."""
    return CopilotConfig(
        ai_provider="local",
        model="test-model",
        max_tokens=1000,
        temperature=0.2,
        context_window=1000,
    )


@pytest.fixture
def temp_project(tmp_path: Path) -> Path:
    """Create a small React/TypeScript project on disk."""
    project = tmp_path / "web_app"
    (project / "src" / "components").mkdir(parents=True)
    (project / "node_modules" / "react").mkdir(parents=True)

    (project / "package.json").write_text(
        json.dumps(
            {
                "name": "web-app",
                "dependencies": {"react": "^18.2.0", "react-dom": "^18.2.0"},
                "devDependencies": {"typescript": "^5.0.0"},
            }
        )
    )
    (project / "tsconfig.json").write_text(json.dumps({"compilerOptions": {"strict": True}}))
    (project / ".gitignore").write_text("*.log\n")
    (project / "debug.log").write_text("noise")
    (project / "node_modules" / "react" / "index.js").write_text("module.exports = {};")
    (project / "src" / "App.tsx").write_text(
        "import { Button } from './components/Button';\n\nexport const App = () => <Button />;\n"
    )
    (project / "src" / "components" / "Button.tsx").write_text(
        "export const Button = () => <button>Click</button>;\n"
    )
    (project / "src" / "components" / "ButtonGroup.tsx").write_text(
        "export const ButtonGroup = () => null;\n"
    )
    (project / "src" / "index.ts").write_text("export * from './App';\n")

    return project
