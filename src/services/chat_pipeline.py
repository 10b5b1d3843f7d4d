"""Retrieval-augmented streaming chat.

One pass per request, no retries::

    embed query -> retrieve top-k -> resolve profile -> assemble context
        -> build prompt -> stream model output

:meth:`ChatPipeline.start` runs every stage up to and including the first
model chunk before it returns.  Anything that goes wrong before output
exists therefore raises to the caller, which can still answer with a plain
error response; once the first chunk is in hand the HTTP status is
committed and later failures can only end the stream.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import structlog

from src.interfaces.embedding_provider import IEmbeddingProvider
from src.interfaces.llm_provider import ILLMProvider
from src.interfaces.vector_store_provider import IVectorStoreProvider
from src.models.brand import PROFILE_MARKER, BrandAttributes
from src.models.chat import ChatMessage
from src.services.context_assembler import ContextAssembler
from src.services.profile_repository import ProfileRepository
from src.utils.errors import BrandKitError, RetrievalUnavailableError
from src.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

_NO_CHUNK = object()


class ChatPipeline:
    """Answers a conversation with brand-consistent streamed text.

    Parameters
    ----------
    embedding_provider:
        Embeds the latest user message for retrieval.
    vector_store:
        Collection searched for supporting guideline snippets.
    llm_provider:
        Streaming chat model.
    profile_repository:
        Source of the stored profile when the caller sends no override.
    system_prompt:
        Template containing a ``{context}`` placeholder.
    assembler:
        Context builder; a default :class:`ContextAssembler` if omitted.
    top_k:
        Number of snippets retrieved per request.
    temperature, max_tokens:
        Sampling parameters passed to the model.
    """

    def __init__(
        self,
        embedding_provider: IEmbeddingProvider,
        vector_store: IVectorStoreProvider,
        llm_provider: ILLMProvider,
        profile_repository: ProfileRepository,
        system_prompt: str,
        assembler: ContextAssembler | None = None,
        top_k: int = 6,
        temperature: float = 0.5,
        max_tokens: int = 1024,
    ) -> None:
        self._embedding = embedding_provider
        self._store = vector_store
        self._llm = llm_provider
        self._profiles = profile_repository
        self._system_prompt = system_prompt
        self._assembler = assembler or ContextAssembler()
        self._top_k = top_k
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def start(
        self,
        messages: list[ChatMessage],
        profile_override: BrandAttributes | None = None,
    ) -> AsyncIterator[str]:
        """Run the pipeline and return an iterator over the model's text chunks.

        Parameters
        ----------
        messages:
            Non-empty conversation; the last entry is the question answered.
        profile_override:
            Attributes sent with the request.  Used instead of the stored
            profile when it has at least one non-empty value.

        Returns
        -------
        AsyncIterator[str]
            Chunks in generation order, starting with the already-received
            first chunk.  Closing it closes the upstream model stream.

        Raises
        ------
        src.utils.errors.RetrievalUnavailableError
            If the query could not be embedded.
        src.utils.errors.BrandKitError
            If retrieval, profile lookup or the model start fails.
        """
        if not messages:
            raise ValueError("messages must not be empty")
        query = messages[-1].content

        try:
            query_vector = await self._embedding.embed_single(query)
        except BrandKitError as exc:
            logger.error("chat_retrieval_failed", error=str(exc))
            raise RetrievalUnavailableError(
                provider_name=self._embedding.get_provider_name()
            ) from exc

        snippets = await self._store.query(
            query_vector, top_k=self._top_k, exclude_marker=PROFILE_MARKER
        )

        if profile_override is not None and profile_override.has_values:
            attributes = profile_override
            profile_source = "override"
        else:
            attributes = await self._profiles.get()
            profile_source = "stored" if attributes.has_values else "none"

        context = self._assembler.build(snippets, attributes)
        system_prompt = self._system_prompt.replace("{context}", context)

        logger.info(
            "chat_prompt_built",
            message_count=len(messages),
            snippet_count=len(snippets),
            profile_source=profile_source,
            context_length=len(context),
            llm_provider=self._llm.get_provider_name(),
        )

        upstream = self._llm.stream(
            system_prompt,
            list(messages),
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        try:
            first = await anext(upstream, _NO_CHUNK)
        except BaseException:
            await _close(upstream)
            raise

        return self._relay(upstream, first)

    async def _relay(self, upstream: AsyncIterator[str], first: Any) -> AsyncIterator[str]:
        chunks = 0
        try:
            if first is _NO_CHUNK:
                return
            chunks += 1
            yield first
            async for chunk in upstream:
                chunks += 1
                yield chunk
        except BrandKitError as exc:
            # Headers are already sent; the stream just ends early.
            logger.error("chat_stream_interrupted", error=str(exc), chunks=chunks)
        finally:
            await _close(upstream)
            logger.info("chat_stream_finished", chunks=chunks)


async def _close(stream: AsyncIterator[str]) -> None:
    aclose = getattr(stream, "aclose", None)
    if aclose is not None:
        await aclose()
