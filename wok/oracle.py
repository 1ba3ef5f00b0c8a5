"""
Deterministic oracle that answers as a secret character would.
"""

from __future__ import annotations

from .knowledge import Answer, KnowledgeBase


class CharacterOracle:
    def __init__(self, knowledge: KnowledgeBase, secret_id: str):
        character = knowledge.character(secret_id)
        if character is None:
            raise KeyError(f"Unknown character id '{secret_id}'.")
        self._secret = character

    @property
    def secret_id(self) -> str:
        return self._secret.id

    def answer(self, question_id: str) -> str:
        # A character with no recorded answer is as unsure as the player would be.
        expected = self._secret.expected(question_id)
        return Answer.MAYBE.value if expected is Answer.UNKNOWN else expected.value

    def confirm(self, character_id: str) -> bool:
        return character_id == self._secret.id
