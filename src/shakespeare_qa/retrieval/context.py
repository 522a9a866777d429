"""Prompt assembly from retrieved passages."""

import logging
from enum import Enum
from typing import Sequence

logger = logging.getLogger(__name__)

CONTEXT_SEPARATOR = "\n---\n"


class PromptStyle(str, Enum):
    CONTEXT = "context"      # vector-store chunks
    PASSAGES = "passages"    # keyword-ranked passages


CONTEXT_TEMPLATE = """You are a Shakespeare expert AI. Use the following context from Shakespeare's works to answer the question.

Context:
{context}

Question: {question}

Answer as helpfully and accurately as possible, citing specific passages when relevant."""

PASSAGES_TEMPLATE = """You are a Shakespeare expert. Use the following passages from Shakespeare's complete works from MIT OpenCourseWare to answer the question.

Relevant passages:
{context}

Question: {question}

Please provide a detailed, accurate answer based on the passages above. If you can identify specific plays, characters, or scenes, please mention them."""

_TEMPLATES = {
    PromptStyle.CONTEXT: CONTEXT_TEMPLATE,
    PromptStyle.PASSAGES: PASSAGES_TEMPLATE,
}


class PromptComposer:
    """Fill a prompt template with a question and its supporting passages."""

    def __init__(self, style: PromptStyle = PromptStyle.CONTEXT):
        self.style = style
        self.template = _TEMPLATES[style]

    def assemble_context(self, fragments: Sequence[str]) -> str:
        """Join passages with the separator used for this style."""
        if self.style == PromptStyle.CONTEXT:
            return CONTEXT_SEPARATOR.join(fragments)
        return "".join(fragments)

    def compose(self, question: str, fragments: Sequence[str]) -> str:
        """Build the full prompt.

        Args:
            question: User question
            fragments: Retrieved passages, best first

        Returns:
            Prompt string
        """
        context = self.assemble_context(fragments)
        prompt = self.template.format(context=context, question=question)

        logger.info(f"Assembled prompt: {len(prompt)} chars from {len(fragments)} passages")
        return prompt
