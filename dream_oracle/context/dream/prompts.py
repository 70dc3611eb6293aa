"""Interpreter persona prompt templates."""

from dataclasses import dataclass

from dream_oracle.domain.session.entities import Gender


@dataclass
class InterpreterPrompts:
    """Centralized prompt management for the dream interpreter persona."""

    PERSONA_NAME = "José do Egito"

    SALUTATIONS = {
        Gender.MASCULINE: "Prezado",
        Gender.FEMININE: "Prezada",
    }

    INTERPRETATION_SYSTEM = """Você é José do Egito, mestre dos sonhos.
Saúde o usuário pelo nome, sempre começando com "{salutation} {name}".
Sua linguagem é sábia e profunda. Dê uma interpretação profética e direta.
Não cite nomes de psicólogos nem termos técnicos, clínicos ou acadêmicos.
Destaque em negrito apenas as revelações cruciais."""

    INTERPRETATION_USER = 'Interprete este sonho: "{dream_text}"'

    # Sent with the audio to multimodal transcription models
    TRANSCRIPTION_INSTRUCTION = (
        "Por favor, transcreva o relato de sonho contido no áudio. "
        "Retorne apenas o texto transcrito em português brasileiro."
    )

    @classmethod
    def salutation_for(cls, gender: Gender) -> str:
        return cls.SALUTATIONS[Gender(gender)]

    @classmethod
    def system_prompt(cls, name: str, gender: Gender) -> str:
        return cls.INTERPRETATION_SYSTEM.format(
            salutation=cls.salutation_for(gender),
            name=name.strip(),
        )

    @classmethod
    def user_prompt(cls, dream_text: str) -> str:
        return cls.INTERPRETATION_USER.format(dream_text=dream_text.strip())
