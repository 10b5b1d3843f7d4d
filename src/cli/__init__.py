"""Command-line tools for BrandKit.

- ``python -m src.cli seed``: store the default brand guidelines
- ``python -m src.cli search QUERY [--top-k N]``: similarity search
- ``python -m src.cli show``: print the stored brand profile
- ``python -m src.cli reset``: delete the stored brand profile

Each run builds its own providers from ``Settings``; there is no shared
state with a running API server beyond the ChromaDB collection itself.
"""
