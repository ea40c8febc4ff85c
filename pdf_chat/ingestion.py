"""PDF ingestion: load, chunk, embed, and upsert into the vector index."""

from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader
from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter

from pdf_chat.config import CHUNK_OVERLAP, CHUNK_SIZE
from pdf_chat.errors import IngestionError
from pdf_chat.models import ModelProvider
from pdf_chat.utils import get_pdf_path, logger
from pdf_chat.vector_index import VectorIndex


def _load_pdf(path: Path) -> list[Document]:
    """Load a single PDF and return one document per page with source metadata."""
    loader = PyPDFLoader(str(path))
    docs = loader.load()
    for d in docs:
        d.metadata["source"] = path.name
        if "page" not in d.metadata and "page_number" in d.metadata:
            d.metadata["page"] = d.metadata["page_number"]
    return docs


def _chunk_documents(
    documents: list[Document],
    chunk_size: int = CHUNK_SIZE,
    chunk_overlap: int = CHUNK_OVERLAP,
) -> list[Document]:
    """Split documents into fixed-size windows with overlap."""
    splitter = RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=["\n\n", "\n", " ", ""],
    )
    return splitter.split_documents(documents)


def _normalize_metadata(chunks: list[Document]) -> None:
    """Flatten metadata to scalar values the vector index accepts."""
    for c in chunks:
        for k, v in list(c.metadata.items()):
            if v is None:
                c.metadata[k] = ""
            elif not isinstance(v, (str, int, float, bool)):
                c.metadata[k] = str(v)
        if isinstance(c.metadata.get("page"), float):
            c.metadata["page"] = int(c.metadata["page"])


def run_ingestion(pdf_path: Path, models: ModelProvider, index: VectorIndex) -> dict:
    """
    Load the PDF, chunk it, embed the chunks and upsert them into the index.
    Any failure raises IngestionError; there is no partial resume.
    Returns summary dict with page and chunk counts.
    """
    logger.info("Starting document upload process...")
    try:
        path = get_pdf_path(pdf_path)
        pages = _load_pdf(path)
        logger.info("Loaded %d pages from %s", len(pages), path.name)

        chunks = _chunk_documents(pages)
        logger.info("Created %d chunks", len(chunks))
        if not chunks:
            raise IngestionError(f"No text could be extracted from {path.name}")
        _normalize_metadata(chunks)

        logger.info("Uploading to vector index (this may take a minute)...")
        stored = index.upsert(chunks, models.embeddings)
    except IngestionError:
        raise
    except Exception as e:
        raise IngestionError(f"Error during upload: {e}") from e

    logger.info("Upload complete: %d chunks stored", stored)
    return {
        "pdf": path.name,
        "page_count": len(pages),
        "chunk_count": stored,
        "message": "Ingestion complete",
    }
