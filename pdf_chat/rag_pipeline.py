"""RAG pipeline: embed the question, retrieve chunks, and answer with history."""

from langchain_core.prompts import PromptTemplate
from pydantic import BaseModel, Field

from pdf_chat.config import CONTEXT_SEPARATOR
from pdf_chat.history import HistoryBuffer
from pdf_chat.models import ModelProvider
from pdf_chat.utils import logger
from pdf_chat.vector_index import SearchMatch, VectorIndex

ANSWERED = "answered"
NO_MATCHES = "no_matches"
EMPTY_CONTEXT = "empty_context"
ERROR = "error"

NO_MATCHES_MESSAGE = "No relevant documents found in database. Please check if documents were uploaded."
EMPTY_CONTEXT_MESSAGE = "No text content found in search results."

RAG_PROMPT = PromptTemplate.from_template(
    """
You are a helpful assistant answering questions based on the provided documentation.

Previous Conversation History:
{history}

Context from the documentation:
{context}

Current Question: {question}

Instructions:
- Answer the question using the information from the context above
- Consider the conversation history to provide contextually relevant answers
- If referring to something from previous conversation, acknowledge it
- If the answer is not in the context, say "I don't have enough information to answer that question."
- Be concise and clear
- Use code examples from the context if relevant

Answer:
"""
)


class AnswerResult(BaseModel):
    """Outcome of one question; only ``answered`` results touch the history."""

    question: str
    status: str
    answer: str | None = None
    context: str = ""
    matches: list[SearchMatch] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == ANSWERED


def build_context(matches: list[SearchMatch]) -> str:
    """Join non-empty chunk texts, most similar first."""
    ranked = sorted(matches, key=lambda m: m.score, reverse=True)
    return CONTEXT_SEPARATOR.join(m.text for m in ranked if m.text)


def render_prompt(history: str, context: str, question: str) -> str:
    return RAG_PROMPT.format(history=history, context=context, question=question)


def answer_question(
    question: str,
    models: ModelProvider,
    index: VectorIndex,
    history: HistoryBuffer,
    top_k: int,
) -> AnswerResult:
    """
    Run one retrieval-and-answer turn.

    The chat model is called at most once. Any provider failure is logged
    and reported with status ``error``; history is only updated on success.
    """
    try:
        logger.info("Creating embedding...")
        query_vector = models.embed(question)

        logger.info("Searching vector index (top %d)...", top_k)
        matches = index.query(query_vector, top_k)
        logger.info("Found %d relevant documents", len(matches))

        if not matches:
            logger.debug("No matches for question")
            return AnswerResult(question=question, status=NO_MATCHES)

        context = build_context(matches)
        if not context:
            logger.debug("All matches had empty text")
            return AnswerResult(question=question, status=EMPTY_CONTEXT, matches=matches)

        prompt = render_prompt(history.format(), context, question)

        logger.info("Asking AI...")
        answer = models.complete(prompt)
    except Exception as e:
        logger.error("Error during chatting: %s", e)
        return AnswerResult(question=question, status=ERROR, error=str(e))

    history.record(question, answer)
    return AnswerResult(
        question=question,
        status=ANSWERED,
        answer=answer,
        context=context,
        matches=matches,
    )
