"""Interactive command-line entrypoint for chatting with the PDF."""

import sys

from pdf_chat.config import Settings
from pdf_chat.errors import ConfigError, IngestionError
from pdf_chat.history import HistoryBuffer
from pdf_chat.ingestion import run_ingestion
from pdf_chat.models import ModelProvider, get_model_provider
from pdf_chat.rag_pipeline import (
    ANSWERED,
    EMPTY_CONTEXT,
    EMPTY_CONTEXT_MESSAGE,
    NO_MATCHES,
    NO_MATCHES_MESSAGE,
    answer_question,
)
from pdf_chat.utils import logger, setup_logging
from pdf_chat.vector_index import VectorIndex, get_vector_index

PROMPT = "Ask me anything--> "

EXIT = "exit"
HISTORY = "history"
CLEAR = "clear"
EMPTY = "empty"
QUESTION = "question"

RESERVED_COMMANDS = (EXIT, HISTORY, CLEAR)


def parse_command(line: str) -> str:
    """Classify a line of input. Reserved words match exactly, ignoring case."""
    lowered = line.lower()
    if lowered in RESERVED_COMMANDS:
        return lowered
    if not line.strip():
        return EMPTY
    return QUESTION


def show_history(history: HistoryBuffer, output=print) -> None:
    output("\n=== Conversation History ===")
    output(history.format())
    output("===========================\n")


def run_chat_loop(
    models: ModelProvider,
    index: VectorIndex,
    history: HistoryBuffer,
    top_k: int,
    input_fn=input,
    output=print,
) -> None:
    """Read lines until 'exit' (or end of input), answering each question in turn."""
    output("\n=== RAG Chat Bot Ready ===")
    output('Type "exit" to quit, "history" to see conversation history, "clear" to clear history\n')

    while True:
        try:
            line = input_fn(PROMPT)
        except (EOFError, KeyboardInterrupt):
            output("\nGoodbye!")
            return

        command = parse_command(line)
        if command == EXIT:
            output("Goodbye!")
            return
        if command == HISTORY:
            show_history(history, output)
            continue
        if command == CLEAR:
            history.clear()
            output("History cleared!\n")
            continue
        if command == EMPTY:
            continue

        output("Processing your question...")
        try:
            result = answer_question(line, models, index, history, top_k)
        except KeyboardInterrupt:
            output("\nGoodbye!")
            return
        if result.status == ANSWERED:
            output(f"\n{result.answer}\n")
        elif result.status == NO_MATCHES:
            output(f"\n{NO_MATCHES_MESSAGE}\n")
        elif result.status == EMPTY_CONTEXT:
            output(f"\n{EMPTY_CONTEXT_MESSAGE}\n")


def main(settings: Settings | None = None) -> int:
    """Configure, optionally ingest the PDF, then chat. Returns the exit code."""
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    try:
        settings.require_credentials()
        models = get_model_provider(settings)
        index = get_vector_index(settings)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    if settings.upload:
        try:
            summary = run_ingestion(settings.pdf_path, models, index)
        except IngestionError:
            logger.exception("Ingestion failed")
            return 1
        logger.info("%s: %d chunks from %s", summary["message"], summary["chunk_count"], summary["pdf"])
    else:
        logger.info("Skipping upload (UPLOAD_TO_PINECONE not set to true)")
        logger.info("Using existing documents in the vector index...")

    run_chat_loop(models, index, HistoryBuffer(), settings.top_k)
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
