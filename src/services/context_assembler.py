"""Builds the context block injected into the chat system prompt."""

from __future__ import annotations

from src.models.brand import BrandAttributes
from src.models.rag import RetrievedSnippet
from src.utils.text import humanize_key

PROFILE_HEADER = (
    "USER-DEFINED BRAND PROFILE (authoritative; takes priority over any other guidance):"
)
GUIDELINES_HEADER = (
    "SUPPLEMENTARY BRAND GUIDELINES (retrieved; use only where consistent with the profile above):"
)


class ContextAssembler:
    """Merges the user's declared profile with retrieved guideline snippets.

    The declared profile always comes first and is labelled authoritative;
    retrieved text follows as supplementary material.  With no declared
    values the output is the retrieved text alone.
    """

    def build(
        self,
        snippets: list[RetrievedSnippet],
        profile_attributes: BrandAttributes,
    ) -> str:
        retrieval_block = "\n".join(s.content for s in snippets)
        override_block = self.render_profile(profile_attributes)
        if not override_block:
            return retrieval_block
        return (
            f"{PROFILE_HEADER}\n{override_block}\n\n"
            f"{GUIDELINES_HEADER}\n{retrieval_block}"
        )

    @staticmethod
    def render_profile(attributes: BrandAttributes) -> str:
        """One ``Label: value`` line per non-empty attribute, in schema order."""
        return "\n".join(
            f"{humanize_key(key)}: {value}" for key, value in attributes.non_empty_items()
        )
