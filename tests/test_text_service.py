import asyncio
import json
from types import SimpleNamespace

from conftest import make_member
from models import Language
from text_service import SERVICE_UNAVAILABLE, TextService


class FakeModels:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.prompts = []

    async def generate_content(self, model, contents):
        self.prompts.append((model, contents))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def fake_client(models):
    return SimpleNamespace(aio=SimpleNamespace(models=models))


def test_translate_returns_stripped_text():
    models = FakeModels(text="  राम \n")
    service = TextService(api_key="key", model="test-model", client=fake_client(models))

    assert asyncio.run(service.translate_name("Ram", Language.HINDI)) == "राम"
    model, prompt = models.prompts[0]
    assert model == "test-model"
    assert '"Ram"' in prompt
    assert "Hindi script" in prompt


def test_translate_network_error_returns_input():
    service = TextService(api_key="key", client=fake_client(FakeModels(error=ConnectionError("down"))))

    assert asyncio.run(service.translate_name("Ram", Language.TAMIL)) == "Ram"


def test_translate_empty_response_returns_input():
    service = TextService(api_key="key", client=fake_client(FakeModels(text="   ")))

    assert asyncio.run(service.translate_name("Ram", Language.TAMIL)) == "Ram"


def test_translate_without_api_key_returns_input():
    service = TextService(api_key=None)

    assert not service.available
    assert asyncio.run(service.translate_name("Ram", Language.BENGALI)) == "Ram"


def test_blank_text_is_not_sent():
    models = FakeModels(text="x")
    service = TextService(api_key="key", client=fake_client(models))

    assert asyncio.run(service.translate_name("", Language.HINDI)) == ""
    assert models.prompts == []


def test_history_prompt_lists_names_and_relations():
    models = FakeModels(text="A proud lineage.")
    service = TextService(api_key="key", client=fake_client(models))
    members = [make_member("A", name="Ravi"), make_member("B", "A", name="Meera", relation_type="Daughter")]

    story = asyncio.run(service.generate_family_history(members, Language.MARATHI))

    assert story == "A proud lineage."
    prompt = models.prompts[0][1]
    assert "Marathi language" in prompt
    structure = json.loads(prompt.split("Structure: ", 1)[1])
    assert structure == [{"name": "Ravi", "relation": "Root"}, {"name": "Meera", "relation": "Daughter"}]


def test_history_failure_returns_empty_string():
    service = TextService(api_key="key", client=fake_client(FakeModels(error=TimeoutError())))

    assert asyncio.run(service.generate_family_history([make_member("A")], Language.URDU)) == ""


def test_history_without_api_key_is_unavailable():
    service = TextService(api_key="")

    assert asyncio.run(service.generate_family_history([make_member("A")], Language.URDU)) == SERVICE_UNAVAILABLE


def test_unknown_language_falls_back_without_calling():
    models = FakeModels(text="x")
    service = TextService(api_key="key", client=fake_client(models))

    assert asyncio.run(service.translate_name("Ram", "Klingon")) == "Ram"
    assert asyncio.run(service.generate_family_history([make_member("A")], "Klingon")) == ""
    assert models.prompts == []
