import json
import os

os.environ.setdefault("TRACING_ENABLED", "false")

import pytest
from fastapi.testclient import TestClient

from services.translation_audit_service.main import app
from services.translation_audit_service.src.config import Settings, get_settings
from services.translation_audit_service.src.routers.audit import get_client_factory

# Helper dummy classes to simulate the OpenAI client and responses
class _Usage:
    def __init__(self, prompt_tokens, completion_tokens, total_tokens):
        self.prompt_tokens = prompt_tokens
        self.completion_tokens = completion_tokens
        self.total_tokens = total_tokens

class _DummyChoiceMsg:
    def __init__(self, content):
        self.content = content

class _DummyChoice:
    def __init__(self, content):
        self.message = _DummyChoiceMsg(content)

class _DummyResponse:
    def __init__(self, content, usage=None):
        self.choices = [_DummyChoice(content)]
        if usage is not None:
            self.usage = usage

class DummyOpenAI:
    """Records every create() call and answers with a fixed reply or error."""

    def __init__(self, reply="", error=None):
        self.reply = reply
        self.error = error
        self.calls = []
        self.chat = type("Chat", (), {})()
        self.chat.completions = type("Completions", (), {})()

        def _create(**kwargs):
            self.calls.append(kwargs)
            if self.error is not None:
                raise self.error
            return _DummyResponse(self.reply, _Usage(10, 20, 30))

        self.chat.completions.create = _create

SAMPLE_REPORT = {
    "rows": [
        {
            "index": 1,
            "source": "欢迎使用 imToken。",
            "translation": "Welcome to use imToken.",
            "issues": "Literal calque of 欢迎使用.",
            "fix": "Welcome to imToken.",
            "score": "5/3/5",
            "severity": "minor",
        },
        {
            "index": 2,
            "source": "创建通行密钥。",
            "translation": "Create a pass key.",
            "issues": "Term inconsistency: should be Passkey.",
            "fix": "Create a Passkey.",
            "score": "4/4/2",
            "severity": "moderate",
        },
    ],
    "summary": "Mostly accurate; watch fixed terms.",
    "rules": ["Use Passkey, never pass key", "Avoid 'Welcome to use'"],
}

@pytest.fixture
def sample_report():
    return json.loads(json.dumps(SAMPLE_REPORT))

@pytest.fixture
def llm():
    return DummyOpenAI(reply=json.dumps(SAMPLE_REPORT, ensure_ascii=False))

@pytest.fixture
def make_client():
    """Build a TestClient with overridden settings and (optionally) a fake OpenAI client."""

    def _make(llm=None, **settings_overrides):
        fields = {"openai_api_key": "sk-test", "tracing_enabled": False}
        fields.update(settings_overrides)
        test_settings = Settings(**fields)
        app.dependency_overrides[get_settings] = lambda: test_settings
        if llm is not None:
            app.dependency_overrides[get_client_factory] = lambda: (lambda _settings: llm)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()

@pytest.fixture
def client(make_client, llm):
    return make_client(llm)

@pytest.fixture
def dummy_openai():
    return DummyOpenAI
