# examples/gemini_rag_example.py
"""
Example demonstrating geminirag with a Gemini session.

This script shows how to:
1. Embed a sentence with an embedding client.
2. Chat with Gemini (non-streaming).
3. Stream a Gemini reply fragment by fragment.
4. Build an index over a text file and query it (RAG).

Prerequisites:
- Install geminirag: `pip install -e .`
- Set `GEMINI_API_KEY` (or `GOOGLE_API_KEY`).
- Optionally set `MISTRAL_API_KEY` to embed with Mistral instead of Gemini.

Run: `python examples/gemini_rag_example.py [path/to/essay.txt]`
"""

import asyncio
import logging
import os
import sys
from pathlib import Path

from geminirag import (
    ChatMessage,
    ConfigError,
    Document,
    GeminiEmbedding,
    GeminiRAGError,
    MistralAIEmbedding,
    Role,
    VectorStoreIndex,
    get_gemini_session,
)
from geminirag.embedding import BaseEmbeddingModel
from geminirag.logging_config import configure_logging, log_display
from geminirag.providers import BaseLLM

logger = logging.getLogger("gemini_rag_example")

DEFAULT_ESSAY_PATH = Path(__file__).parent / "data" / "sample_essay.txt"


async def rag(llm: BaseLLM, embed_model: BaseEmbeddingModel, query: str, essay_path: Path) -> str:
    """Index the essay and answer `query` from it."""
    essay = essay_path.read_text(encoding="utf-8")
    document = Document(text=essay, id=str(essay_path), metadata={"source": essay_path.name})

    index = await VectorStoreIndex.from_documents([document], llm=llm, embed_model=embed_model)
    try:
        query_engine = index.as_query_engine()
        response = await query_engine.query(query)
        return response.response
    finally:
        await index.storage.close()


async def main() -> None:
    configure_logging(app_name="gemini_rag_example")
    essay_path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_ESSAY_PATH

    if os.environ.get("MISTRAL_API_KEY"):
        embedding: BaseEmbeddingModel = MistralAIEmbedding()
    else:
        embedding = GeminiEmbedding()

    try:
        # embeddings
        vector = await embedding.get_text_embedding("What is the best French cheese?")
        print(f"{type(embedding).__name__} embeddings are {len(vector)} numbers long\n")

        # chat api (non-streaming)
        llm = get_gemini_session()
        log_display(logger, logging.INFO, f"Using Gemini model '{llm.model}'")
        response = await llm.chat([ChatMessage(role=Role.USER, content="What is the best French cheese?")])
        print(response.message.content)

        # chat api (streaming)
        stream = await llm.stream_chat(
            [ChatMessage(role=Role.USER, content="Who is the most renowned French painter?")]
        )
        async for chunk in stream:
            sys.stdout.write(chunk)
            sys.stdout.flush()
        print()

        # rag
        answer = await rag(llm, embedding, "What did the author do in college?", essay_path)
        print(answer)
    finally:
        await embedding.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)
    except GeminiRAGError as e:
        logger.error(f"geminirag error: {e}", exc_info=True)
        sys.exit(1)
