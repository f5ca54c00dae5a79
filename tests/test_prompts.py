"""Image prompt generation with a mocked OpenAI client."""

import json
from types import SimpleNamespace
from unittest import mock

import pytest
from openai import OpenAIError

from aiaio_core import llm_client, prompts
from aiaio_core.config import get_settings
from aiaio_core.errors import AdminError, ConfigurationError


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def fake_openai(content):
    client = mock.Mock()
    client.chat.completions.create.return_value = completion(content)
    return client


def test_build_user_prompt_general():
    context = prompts.PromptContext(theme="Ocean", age_range="2-4", template="name-video", prompt_count=2)
    text = prompts.build_user_prompt(context, "left_safe")

    assert text.startswith(prompts.NAME_VIDEO_INSTRUCTIONS)
    assert "Theme: Ocean" in text
    assert "Safe Zone: left_safe" in text
    assert "This is general content for children." in text
    assert "Generate 2 image prompts for a Ocean video targeting 2-4 year olds." in text


def test_build_user_prompt_personalized_lullaby():
    context = prompts.PromptContext(
        theme="Moon",
        age_range="2-5",
        template="lullaby",
        child_name="Ava",
        personalization="personalized",
        art_style="Watercolor",
        additional_context="Include a teddy bear",
    )
    text = prompts.build_user_prompt(context, "frame")

    assert text.startswith(prompts.LULLABY_INSTRUCTIONS)
    assert "personalized for a child named Ava" in text
    assert "Art Style: Watercolor" in text
    assert "Additional context: Include a teddy bear" in text


def test_generate_prompts_defaults():
    client = fake_openai(json.dumps({"images": ["a calm moon", "a sleepy bear"]}))
    context = prompts.PromptContext(theme="Moon", age_range="2-5", template="lullaby")

    result = prompts.generate_prompts(context, client=client)

    assert result["images"] == ["a calm moon", "a sleepy bear"]
    meta = result["metadata"]
    assert meta["safeZone"] == "slideshow"
    assert meta["aspectRatio"] == "16:9"
    assert meta["artStyle"] == "2D Pixar Style"

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][0] == {"role": "system", "content": prompts.SYSTEM_PROMPT}


def test_generate_prompts_name_video_default_zone():
    client = fake_openai('{"images": []}')
    context = prompts.PromptContext(theme="Farm", age_range="3-5", template="name-video")
    assert prompts.generate_prompts(context, client=client)["metadata"]["safeZone"] == "center_safe"


@pytest.mark.parametrize("content", ["", "not json"])
def test_complete_json_bad_responses(content):
    with pytest.raises(AdminError):
        llm_client.complete_json("system", "user", client=fake_openai(content))


def test_complete_json_wraps_openai_errors():
    client = mock.Mock()
    client.chat.completions.create.side_effect = OpenAIError("rate limited")
    with pytest.raises(AdminError, match="rate limited"):
        llm_client.complete_json("system", "user", client=client)


def test_get_client_requires_key(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "")
    get_settings.cache_clear()
    with pytest.raises(ConfigurationError):
        llm_client.get_client()


def test_save_prompts(db):
    generated = {
        "left_safe": {"images": ["p1", "p2"], "metadata": {"theme": "Ocean", "artStyle": "Watercolor"}},
        "right_safe": {"images": ["p3"], "metadata": {"theme": "Ocean"}},
    }

    saved = prompts.save_prompts(db, generated)

    assert len(saved) == 3
    rows = db.rows("prompts")
    assert {r["safe_zone"] for r in rows} == {"left_safe", "right_safe"}
    assert all(r["status"] == "pending" and r["asset_type"] == "image" for r in rows)
    assert [r["style"] for r in rows] == ["Watercolor", "Watercolor", "2D Pixar Style"]


def test_save_nothing_skips_insert(db):
    assert prompts.save_prompts(db, {"left_safe": {"images": []}}) == []
    assert db.calls == []
