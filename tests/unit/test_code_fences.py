"""
Tests for code fence rules, normalization and the fence fixer.
"""

from docs_auditor.core.constants import Severity
from docs_auditor.models.document import CodeFence
from docs_auditor.parsing.fences import needs_example_meta, needs_language, normalize_fence
from docs_auditor.rules.code_fence_rules import (
    FenceExampleMetaRule,
    FenceLanguageRule,
    UnclosedFenceRule,
)
from docs_auditor.services.fence_fixer import FenceFixer

DOC_WITH_FENCES = """\
---
title: Setup
sidebar_position: 1
---

# Setup

```
npm install
```

```js
function main() {}
```

```ts title="app.ts"
export const app = 1;
```

```jsx example
<App />
```

```python
print("ok")
```
"""


class TestNormalizeFence:
    """Tests for fence normalization."""

    def test_missing_language_becomes_text(self):
        fence = normalize_fence(CodeFence(line=1))
        assert fence.opening() == "```text"

    def test_script_fence_gets_example_meta(self):
        assert normalize_fence(CodeFence(line=1, lang="javascript")).opening() == "```javascript example"
        assert (
            normalize_fence(CodeFence(line=1, lang="tsx", meta='title="a.tsx"')).opening()
            == '```tsx title="a.tsx" example'
        )

    def test_already_normalized_is_unchanged(self):
        fence = CodeFence(line=1, lang="ts", meta="example showLineNumbers")
        assert normalize_fence(fence) == fence
        assert not needs_example_meta(fence)

    def test_other_languages_untouched(self):
        fence = CodeFence(line=1, lang="python", meta="title=x.py")
        assert normalize_fence(fence) == fence

    def test_predicates(self):
        assert needs_language(CodeFence(line=1))
        assert not needs_language(CodeFence(line=1, lang="bash"))
        assert needs_example_meta(CodeFence(line=1, lang="js"))
        assert not needs_example_meta(CodeFence(line=1, lang="json"))


class TestFenceRules:
    """Tests for the code fence rules."""

    def test_language_and_meta_findings(self, parse_doc, context):
        document = parse_doc(DOC_WITH_FENCES)

        language = FenceLanguageRule().check(document, context)
        meta = FenceExampleMetaRule().check(document, context)

        assert [f.line for f in language] == [8]
        assert all(f.fixable for f in language)
        assert [f.line for f in meta] == [12, 16]
        assert all(f.severity == Severity.INFO for f in meta)

    def test_unclosed_fence(self, parse_doc, context):
        document = parse_doc("---\ntitle: x\n---\n```bash\nls\n")

        findings = UnclosedFenceRule().check(document, context)

        assert len(findings) == 1
        assert findings[0].line == 4
        assert findings[0].severity == Severity.ERROR


class TestFenceFixer:
    """Tests for FenceFixer."""

    def test_fix_text(self, docs_dir, settings):
        new_text, changes = FenceFixer(docs_dir, settings).fix_text(DOC_WITH_FENCES)

        assert [(c.line, c.before, c.after) for c in changes] == [
            (8, "```", "```text"),
            (12, "```js", "```js example"),
            (16, '```ts title="app.ts"', '```ts title="app.ts" example'),
        ]
        assert "```jsx example\n" in new_text
        assert new_text.count("\n```\n") == 5
        assert new_text.startswith("---\ntitle: Setup\n")

    def test_fix_text_is_idempotent(self, docs_dir, settings):
        fixer = FenceFixer(docs_dir, settings)
        once, _ = fixer.fix_text(DOC_WITH_FENCES)
        twice, changes = fixer.fix_text(once)

        assert changes == []
        assert twice == once

    def test_preserves_bom_and_crlf(self, docs_dir, settings):
        text = "\ufeff# Title\r\n\r\n```\r\ncode\r\n```\r\n"

        new_text, changes = FenceFixer(docs_dir, settings).fix_text(text)

        assert len(changes) == 1
        assert new_text == "\ufeff# Title\r\n\r\n```text\r\ncode\r\n```\r\n"

    def test_fix_all_dry_run_and_write(self, docs_dir, write_doc, settings):
        path = write_doc("guides/setup.md", DOC_WITH_FENCES)
        write_doc("clean.md", "# Clean\n\n```bash\nls\n```\n")
        fixer = FenceFixer(docs_dir, settings)

        results = fixer.fix_all(write=False)

        assert [r.path for r in results] == ["guides/setup.md"]
        assert results[0].written is False
        assert path.read_text(encoding="utf-8") == DOC_WITH_FENCES

        results = fixer.fix_all(write=True)

        assert results[0].written is True
        assert "```ts title=\"app.ts\" example" in path.read_text(encoding="utf-8")
        assert fixer.fix_all(write=False) == []
