"""End-to-end smoke test covering request file through story JSON."""

import json

import pytest

import main as main_module


class StubLLMClient:
    """Answers story, enhancement and title prompts with canned text."""

    calls = []

    def __init__(self, provider: str = "openai", timeout=None):
        self.provider = provider
        self.timeout = timeout

    def generate(self, system: str, user: str, max_tokens: int = 800, temperature: float = 0.7):
        self.calls.append({"system": system, "user": user, "max_tokens": max_tokens})
        if "titres accrocheurs" in system:
            return "Tokyo, entre néons et temples"
        if "Enrichis le récit" in system:
            return "Récit enrichi: les lanternes de Senso-ji brillaient. Un souvenir inoubliable."
        return (
            "Titre: Printemps à Tokyo\n"
            "Le voyage commença à Shinjuku. La vue depuis la tour était spectaculaire.\n"
            "Il pleuvait souvent."
        )


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "trip.json"
    path.write_text(json.dumps({
        "trip": {"title": "Tokyo", "location": "Japon", "startDate": "2024-04-01"},
        "photos": [
            {"id": 1, "url": "/uploads/1.jpg", "caption": "Senso-ji", "location": "Asakusa"},
            {"id": 2, "url": "/uploads/2.jpg", "originalName": "IMG_0002.jpg"},
        ],
        "settings": {"style": "blog", "mood": "exciting", "length": "short", "includePhotos": True},
        "customPrompt": "Parle de la nourriture",
    }, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture
def smoke_env(monkeypatch, tmp_path, request_file):
    StubLLMClient.calls = []
    monkeypatch.setattr(main_module, "load_dotenv", lambda: None)
    monkeypatch.setattr(main_module, "LLMClient", StubLLMClient)
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setenv("STORY_INPUT_FILE", str(request_file))
    monkeypatch.setenv("STORY_OUTPUT_FILE", str(tmp_path / "story.json"))
    monkeypatch.delenv("STORY_ENHANCE", raising=False)
    monkeypatch.delenv("STORY_REGENERATE_TITLE", raising=False)
    return tmp_path


def test_e2e_smoke_flow(smoke_env):
    """Run the main flow with generation stubbed out."""
    assert main_module.main() == 0

    story = json.loads((smoke_env / "story.json").read_text(encoding="utf-8"))
    assert story["title"] == "Printemps à Tokyo"
    assert story["content"].startswith("Le voyage commença à Shinjuku.")
    assert story["wordCount"] == len(story["content"].split())
    assert story["readingTime"] == 1
    assert story["highlights"] == ["La vue depuis la tour était spectaculaire"]
    assert story["photos"] == [
        {"id": 1, "url": "/uploads/1.jpg", "caption": "Senso-ji", "location": "Asakusa"},
        {"id": 2, "url": "/uploads/2.jpg", "caption": "IMG_0002.jpg", "location": None},
    ]
    assert story["style"] == "blog"
    assert len(StubLLMClient.calls) == 1
    assert StubLLMClient.calls[0]["max_tokens"] == 400
    assert "Instructions personnalisées: Parle de la nourriture" in StubLLMClient.calls[0]["user"]


def test_e2e_smoke_with_enhancement_and_title(smoke_env, monkeypatch):
    """Enhancement and title regeneration replace body and title."""
    monkeypatch.setenv("STORY_ENHANCE", "true")
    monkeypatch.setenv("STORY_REGENERATE_TITLE", "1")

    assert main_module.main() == 0

    story = json.loads((smoke_env / "story.json").read_text(encoding="utf-8"))
    assert story["title"] == "Tokyo, entre néons et temples"
    assert story["content"].startswith("Récit enrichi")
    assert len(StubLLMClient.calls) == 3
    assert "Photo: Senso-ji à Asakusa" in StubLLMClient.calls[1]["user"]


def test_e2e_generation_failure_returns_error_code(smoke_env, monkeypatch):
    """A failing generation service makes main() return 1 without output."""
    from travelstory.llm import GenerationError

    def failing_generate(self, system, user, max_tokens=800, temperature=0.7):
        raise GenerationError("service unavailable")

    monkeypatch.setattr(StubLLMClient, "generate", failing_generate)

    assert main_module.main() == 1
    assert not (smoke_env / "story.json").exists()
