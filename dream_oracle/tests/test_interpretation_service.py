"""Tests for InterpretationService against a mocked LLM port."""

import pytest

from dream_oracle.context.dream.builder import InterpretationContextBuilder
from dream_oracle.domain.errors import InterpretationError
from dream_oracle.domain.session.entities import Gender
from dream_oracle.services.interpretation.service import InterpretationService


@pytest.mark.asyncio
async def test_interpret_returns_stripped_text(interpretation_service, mock_llm):
    mock_llm.generate_response.return_value = "\n  Prezada Maria, o rio anuncia fartura.  \n"

    text = await interpretation_service.interpret("Maria", Gender.FEMININE, "Vi um rio dourado")

    assert text == "Prezada Maria, o rio anuncia fartura."
    mock_llm.generate_response.assert_awaited_once()


@pytest.mark.asyncio
async def test_sampling_parameters_come_from_builder(mock_llm):
    service = InterpretationService(mock_llm, InterpretationContextBuilder(temperature=0.3, top_p=0.5))

    await service.interpret("João", Gender.MASCULINE, "Voei")

    assert mock_llm.generate_response.call_args.kwargs == {"temperature": 0.3, "top_p": 0.5}


@pytest.mark.asyncio
@pytest.mark.parametrize("output", ["", "   ", None])
async def test_empty_output_raises(interpretation_service, mock_llm, output):
    mock_llm.generate_response.return_value = output

    with pytest.raises(InterpretationError):
        await interpretation_service.interpret("Maria", Gender.FEMININE, "Vi um rio dourado")


@pytest.mark.asyncio
async def test_llm_errors_propagate(interpretation_service, mock_llm):
    mock_llm.generate_response.side_effect = TimeoutError("read timeout")

    with pytest.raises(TimeoutError):
        await interpretation_service.interpret("Maria", Gender.FEMININE, "Vi um rio dourado")
