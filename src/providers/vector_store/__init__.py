"""Vector store provider implementations.

ChromaDB is the sole implementation: one cosine-space collection holds the
profile record and the generic guideline snippets.  Local persistence at
CHROMADB_PERSIST_DIR by default, or a remote server via CHROMADB_HOST.

To use another database, implement IVectorStoreProvider and register it in
main.py.
"""

from src.providers.vector_store.chromadb_provider import ChromaDBProvider

__all__ = ["ChromaDBProvider"]
