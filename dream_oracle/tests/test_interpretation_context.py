"""Tests for the interpreter persona prompts and context builder."""

import pytest

from dream_oracle.context.dream import (
    InterpretationContextBuilder,
    InterpretationContextWindow,
    InterpreterPrompts,
)
from dream_oracle.domain.session.entities import Gender


@pytest.mark.parametrize("gender, salutation", [
    (Gender.MASCULINE, "Prezado"),
    (Gender.FEMININE, "Prezada"),
    ("feminino", "Prezada"),
])
def test_salutation_follows_gender(gender, salutation):
    assert InterpreterPrompts.salutation_for(gender) == salutation


def test_system_prompt_addresses_user_by_name():
    prompt = InterpreterPrompts.system_prompt("  Maria ", Gender.FEMININE)

    assert '"Prezada Maria"' in prompt
    assert "José do Egito" in prompt
    assert "psicólogos" in prompt
    assert "negrito" in prompt


def test_user_prompt_quotes_dream():
    assert InterpreterPrompts.user_prompt(" Vi um rio dourado\n") == 'Interprete este sonho: "Vi um rio dourado"'


def test_builder_defaults():
    window = InterpretationContextBuilder().build(" João ", Gender.MASCULINE, " Voei alto ")

    assert isinstance(window, InterpretationContextWindow)
    assert window.name == "João"
    assert window.dream_text == "Voei alto"
    assert window.temperature == 0.8
    assert window.top_p == 0.95
    assert window.metadata["persona"] == "José do Egito"


def test_builder_messages():
    builder = InterpretationContextBuilder(temperature=0.5, top_p=0.9)

    window, messages = builder.build_messages("Maria", "feminino", "Vi um rio dourado")

    assert window.gender is Gender.FEMININE
    assert window.temperature == 0.5
    assert [m["role"] for m in messages] == ["system", "user"]
    assert "Prezada Maria" in messages[0]["content"]
    assert messages[1]["content"] == 'Interprete este sonho: "Vi um rio dourado"'


def test_token_estimate():
    window = InterpretationContextWindow(name="Ana", gender=Gender.FEMININE, dream_text="x" * 41)
    assert window.estimate_tokens() == 11
