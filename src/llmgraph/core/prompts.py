"""Positional prompt templates.

A template marks each substitution point with ``{}``. Placeholders are filled
strictly left to right, so any other braces in the text (JSON examples, for
instance) are left alone.

Example:
    >>> template = PromptTemplate(text="What's the capital of {}?")
    >>> template.fill(["America"])
    "What's the capital of America?"
"""

from typing import List, Sequence
from pydantic import BaseModel, Field

from llmgraph.core.errors import LLMError

PLACEHOLDER = "{}"


class PromptTemplate(BaseModel):
    """A prompt with ordered positional placeholders."""
    text: str = Field(..., description="Template text containing '{}' placeholders")

    @property
    def placeholder_count(self) -> int:
        return self.text.count(PLACEHOLDER)

    def check(self, variables: Sequence[str]) -> None:
        """Verify the variable list lines up with the placeholders.

        Raises:
            LLMError: TEMPLATE_MISMATCH if the counts differ
        """
        if len(variables) != self.placeholder_count:
            raise LLMError.template_mismatch(self.placeholder_count, len(variables))

    def fill(self, values: Sequence[str]) -> str:
        """Substitute values into the placeholders, in order.

        Raises:
            LLMError: TEMPLATE_MISMATCH if the value count differs
        """
        parts: List[str] = self.text.split(PLACEHOLDER)
        if len(values) != len(parts) - 1:
            raise LLMError.template_mismatch(len(parts) - 1, len(values))

        filled = [parts[0]]
        for value, tail in zip(values, parts[1:]):
            filled.append(value)
            filled.append(tail)
        return "".join(filled)
