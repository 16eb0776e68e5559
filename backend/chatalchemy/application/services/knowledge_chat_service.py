"""Knowledge chat service — answers questions from knowledge-base matches plus an LLM.

Flow:
  1. Search the knowledge base with the raw question.
  2. Build a system prompt with attribution rules for the preloaded dataset.
  3. Embed matched rows into the user prompt when any were found.
  4. Call the chat provider with the recent history window.
"""

import logging
import time

from chatalchemy.application.interfaces.chat_provider import ChatProvider
from chatalchemy.application.services.knowledge_query_engine import KnowledgeQueryEngine
from chatalchemy.domain.entities import ChatAnswer, ChatMessage, KnowledgeQueryResult
from chatalchemy.domain.exceptions import ChatProviderError

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "Sorry, I could not generate a response."

_SYSTEM_PROMPT = """\
You are {assistant_name}, an AI assistant that combines knowledge from {dataset_name} with data analysis.

CRITICAL RESPONSE FORMATTING:
1. When using information from the {dataset_name} database, start your response with "According to {dataset_name}, "
2. When providing general knowledge without specific data references, start your response with "Based on my general knowledge, "

Always maintain a helpful and informative tone, explaining complex topics clearly.
Do not use markdown formatting in your responses.

Current context: {context}"""

_DATA_PROMPT = """\
Using the following data:

{data}

Question: {question}

Provide a clear, natural response using the appropriate attribution prefix as specified in the system prompt."""


class KnowledgeChatService:
    """Application service — knowledge search + prompt construction + completion."""

    def __init__(
        self,
        provider: ChatProvider,
        engine: KnowledgeQueryEngine,
        *,
        model: str,
        dataset_name: str,
        assistant_name: str = "Chat Alchemy",
        temperature: float | None = 0.7,
        history_window: int = 5,
    ):
        self._provider = provider
        self._engine = engine
        self._model = model
        self._dataset_name = dataset_name
        self._assistant_name = assistant_name
        self._temperature = temperature
        self._history_window = history_window

    async def answer(
        self, question: str, history: list[ChatMessage] | None = None
    ) -> ChatAnswer:
        """Answer ``question``, returning the reply with any chart/table payloads.

        Raises:
            ChatProviderError: If the provider call fails.
        """
        knowledge = self._engine.search(question)
        messages = self.build_messages(question, knowledge, history or [])

        start = time.monotonic()
        try:
            result = await self._provider.complete(
                messages=messages,
                model=self._model,
                temperature=self._temperature,
            )
        except ChatProviderError as e:
            logger.error("Chat completion error: %s", e)
            raise

        logger.info(
            "Chat answered in %dms (model=%s, kb_match=%s, preloaded=%s)",
            int((time.monotonic() - start) * 1000),
            result.model,
            knowledge.found_any_match,
            knowledge.from_preloaded,
        )
        return ChatAnswer(
            content=result.content.strip() or FALLBACK_REPLY,
            from_preloaded=knowledge.from_preloaded,
            found_in_knowledge_base=knowledge.found_any_match,
            chart=knowledge.chart,
            table=knowledge.table,
            model=result.model,
            usage=result.usage,
        )

    def build_messages(
        self,
        question: str,
        knowledge: KnowledgeQueryResult,
        history: list[ChatMessage],
    ) -> list[ChatMessage]:
        """System prompt, then the last ``history_window`` turns, then the question."""
        context = (
            f"Using {self._dataset_name} database"
            if knowledge.from_preloaded
            else ("Using uploaded data" if knowledge.found_any_match else "No specific data source")
        )
        system_prompt = _SYSTEM_PROMPT.format(
            assistant_name=self._assistant_name,
            dataset_name=self._dataset_name,
            context=context,
        )

        prompt = question
        if knowledge.found_any_match:
            prompt = _DATA_PROMPT.format(data=knowledge.text, question=question)

        recent = history[-self._history_window:] if self._history_window > 0 else []
        return [
            ChatMessage(role="system", content=system_prompt),
            *(ChatMessage(role=m.role, content=m.content) for m in recent),
            ChatMessage(role="user", content=prompt),
        ]
