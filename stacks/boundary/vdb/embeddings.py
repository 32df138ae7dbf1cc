"""
Cohere embeddings wrapper with fixed output dimensionality.

Wraps CohereEmbeddings so every vector written to or queried against the
Atlas index has the dimension the index was defined with. Inputs are
truncated before embedding to stay under the model's token limit.

Dependencies: langchain_cohere, langchain_core
System role: Embedding generation for the message vector index
"""

import logging

from langchain_cohere import CohereEmbeddings
from langchain_core.embeddings import Embeddings

from stacks.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(Embeddings):
    """
    CohereEmbeddings wrapper that validates output dimensionality.

    Documents are embedded with input_type "search_document" and queries
    with "search_query", as Cohere v3 models expect.
    """

    def __init__(
        self,
        model: str = "embed-english-v3.0",
        dimension: int = 1024,
        max_chars: int = 8000,
        cohere_api_key: str | None = None,
    ) -> None:
        """
        Initialize embeddings with a fixed expected dimension.

        Args:
            model: Cohere embedding model ID
            dimension: Dimension every vector must have
            max_chars: Inputs are cut to this many characters
            cohere_api_key: Cohere API key (falls back to COHERE_API_KEY)
        """
        kwargs = {"model": model}
        if cohere_api_key:
            kwargs["cohere_api_key"] = cohere_api_key
        self._client = CohereEmbeddings(**kwargs)
        self._model = model
        self._dimension = dimension
        self._max_chars = max_chars
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, dimension={dimension}"
        )

    @property
    def dimension(self) -> int:
        return self._dimension

    def _check(self, vector: list[float]) -> list[float]:
        if len(vector) != self._dimension:
            raise EmbeddingError(
                f"Invalid embedding dimension: {len(vector)}, expected {self._dimension}",
                details={"model": self._model},
            )
        return vector

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """
        Embed documents, truncating each input.

        Raises:
            EmbeddingError: If the API call fails or a vector has the wrong dimension
        """
        try:
            vectors = self._client.embed_documents([t[: self._max_chars] for t in texts])
        except Exception as e:
            logger.error(f"{__name__}:embed_documents - {type(e).__name__}: {e}")
            raise EmbeddingError("Error generating embedding with Cohere") from e
        return [self._check(v) for v in vectors]

    def embed_query(self, text: str) -> list[float]:
        """
        Embed a search query, truncating the input.

        Raises:
            EmbeddingError: If the API call fails or the vector has the wrong dimension
        """
        try:
            vector = self._client.embed_query(text[: self._max_chars])
        except Exception as e:
            logger.error(f"{__name__}:embed_query - {type(e).__name__}: {e}")
            raise EmbeddingError("Error generating query embedding with Cohere") from e
        return self._check(vector)

    def generate_embedding(self, text: str) -> list[float]:
        """Embed a single message for storage."""
        return self.embed_documents([text])[0]
