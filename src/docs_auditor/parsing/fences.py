"""
Code fence normalization for MDX.

MDX compiles fenced JavaScript/TypeScript as code unless it is clearly an
example, which breaks builds with "Unexpected FunctionDeclaration in code".
Every fence therefore gets a language, and script fences get an ``example``
meta tag.
"""

from __future__ import annotations

from ..core.constants import DEFAULT_FENCE_LANGUAGE, EXAMPLE_META, SCRIPT_LANGUAGES
from ..models.document import CodeFence


def needs_language(fence: CodeFence) -> bool:
    return not fence.lang


def needs_example_meta(fence: CodeFence) -> bool:
    if fence.lang not in SCRIPT_LANGUAGES:
        return False
    return not fence.meta or EXAMPLE_META not in fence.meta


def normalize_fence(fence: CodeFence) -> CodeFence:
    """Return a copy of the fence with language and example meta applied."""
    lang = fence.lang or DEFAULT_FENCE_LANGUAGE
    meta = fence.meta
    if lang in SCRIPT_LANGUAGES:
        if not meta:
            meta = EXAMPLE_META
        elif EXAMPLE_META not in meta:
            meta = f"{meta} {EXAMPLE_META}"
    return fence.model_copy(update={"lang": lang, "meta": meta})
