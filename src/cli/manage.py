# =============================================================================
# src/cli/manage.py: Operator CLI for the brand collection
# =============================================================================
#
# One-shot commands against the same ChromaDB collection the API serves:
#
#   seed   : Embed the default brand guidelines from config/config.yaml
#            and store them as retrievable snippets
#   search : Embed a query and print the nearest snippets with scores
#   show   : Print the stored brand profile
#   reset  : Delete the stored brand profile
#
# Usage examples:
#   python -m src.cli seed
#   python -m src.cli search "how should we greet customers" --top-k 3
#   python -m src.cli show
#   python -m src.cli reset
# =============================================================================

"""Operator CLI for the BrandKit vector collection."""

from __future__ import annotations

import argparse
import asyncio
import sys

from src.config.loader import load_config
from src.config.settings import Settings
from src.models.rag import GuidelineDocument
from src.utils.errors import BrandKitError
from src.utils.logging import configure_logging


def _build_components(app_settings: Settings) -> dict:
    """Construct the embedding provider, store and repository.

    Imports are deferred so ``--help`` does not load the SDKs.
    """
    from src.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
    from src.providers.vector_store.chromadb_provider import ChromaDBProvider
    from src.services.profile_repository import ProfileRepository

    embedding = OpenAIEmbeddingProvider(settings=app_settings)
    dimension = embedding.get_dimension()
    store = ChromaDBProvider(
        dimension=dimension,
        persist_directory=app_settings.chromadb_persist_dir,
        collection_name=app_settings.chromadb_collection,
        host=app_settings.chromadb_host,
        port=app_settings.chromadb_port,
    )
    repository = ProfileRepository(
        embedding_provider=embedding,
        vector_store=store,
        dimension=dimension,
    )
    return {"embedding": embedding, "store": store, "repository": repository}


async def _handle_seed(components: dict, app_config: dict) -> int:
    """Embed and store the configured guideline set."""
    from src.services.guideline_seeder import GuidelineSeeder

    raw = app_config.get("seed", {}).get("guidelines", [])
    documents = [GuidelineDocument.model_validate(item) for item in raw]
    if not documents:
        print("No guidelines configured under seed.guidelines. Nothing to seed.")
        return 0

    if not components["embedding"].is_available():
        print("Error: no embedding API key configured (set OPENAI_API_KEY).", file=sys.stderr)
        return 1

    seeder = GuidelineSeeder(components["embedding"], components["store"])
    ids = await seeder.seed(documents)
    print(f"Seeded {len(ids)} guidelines.")
    for doc, record_id in zip(documents, ids, strict=True):
        print(f"  {record_id}  [{doc.category}]")
    return 0


async def _handle_search(args: argparse.Namespace, components: dict) -> int:
    """Print the nearest snippets for a query."""
    vector = await components["embedding"].embed_single(args.query)
    snippets = await components["store"].query(vector, top_k=args.top_k)
    if not snippets:
        print("No results.")
        return 0
    for rank, snippet in enumerate(snippets, start=1):
        print(f"{rank}. (score {snippet.score:.3f})")
        print(f"   {snippet.content}")
    return 0


async def _handle_show(components: dict) -> int:
    profile = await components["repository"].load()
    if profile is None:
        print("No brand profile stored.")
        return 0

    print("Brand Profile")
    print("=" * 40)
    print(f"  Id:            {profile.id}")
    updated = profile.updated_at.isoformat() if profile.updated_at else "unknown"
    print(f"  Updated:       {updated}")
    print(f"  Has embedding: {profile.has_embedding}")
    items = profile.attributes.to_mapping()
    if items:
        print("\n  Variables:")
        width = max(len(key) for key in items)
        for key, value in items.items():
            print(f"    {key:<{width}}  {value}")
    return 0


async def _handle_reset(components: dict) -> int:
    found = await components["repository"].reset()
    print("Brand profile deleted." if found else "No brand profile found to reset.")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m src.cli",
        description="Manage the BrandKit vector collection.",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("seed", help="Store the default brand guidelines")

    search_parser = subparsers.add_parser("search", help="Similarity-search the collection")
    search_parser.add_argument("query", help="Free-text query")
    search_parser.add_argument(
        "--top-k", type=int, default=6, help="Number of results (default: 6)"
    )

    subparsers.add_parser("show", help="Print the stored brand profile")
    subparsers.add_parser("reset", help="Delete the stored brand profile")
    return parser


async def _dispatch(args: argparse.Namespace, components: dict, app_config: dict) -> int:
    if args.command == "seed":
        return await _handle_seed(components, app_config)
    if args.command == "search":
        return await _handle_search(args, components)
    if args.command == "show":
        return await _handle_show(components)
    return await _handle_reset(components)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Exits 1 on a missing subcommand or on any provider or store error.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level, component="cli")
    try:
        app_config = load_config(settings=app_settings)
        components = _build_components(app_settings)
        exit_code = asyncio.run(_dispatch(args, components, app_config))
    except BrandKitError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
