"""
Tests for the command-line interface.
"""

import json

import pytest
import yaml

from docs_auditor.main import main


def run(capsys, *argv):
    """Run the CLI and return (exit code, stdout, stderr)."""
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


@pytest.fixture
def sidebar_file(tmp_path):
    """A sidebar definition referencing one existing and one missing doc."""
    path = tmp_path / "sidebars.yaml"
    path.write_text(
        yaml.safe_dump({"docs": ["intro", {"Security": ["security/audit-logging"]}]}),
        encoding="utf-8",
    )
    return path


class TestLintCommand:
    """Tests for `docs-auditor lint`."""

    def test_clean_docs(self, capsys, docs_dir, write_doc, make_doc):
        write_doc("intro.md", make_doc("Intro", 1))

        code, out, _ = run(capsys, "lint", str(docs_dir), "--format", "json")

        assert code == 0
        data = json.loads(out)
        assert data["documents_checked"] == 1
        assert data["findings"] == []

    def test_errors_fail(self, capsys, docs_dir, write_doc):
        write_doc("intro.md", "# Intro\n")

        code, out, _ = run(capsys, "lint", str(docs_dir), "--format", "json")

        assert code == 1
        rule_ids = {f["rule_id"] for f in json.loads(out)["findings"]}
        assert "front-matter-missing" in rule_ids

    def test_strict_fails_on_warnings(self, capsys, docs_dir, write_doc, make_doc):
        write_doc("intro.md", make_doc("Intro", 1, body="TBD"))

        assert run(capsys, "lint", str(docs_dir), "--format", "json")[0] == 0
        assert run(capsys, "lint", str(docs_dir), "--format", "json", "--strict")[0] == 1

    def test_disable(self, capsys, docs_dir, write_doc, make_doc):
        write_doc("intro.md", make_doc("Intro", 1, body="TBD"))

        code, out, _ = run(
            capsys, "lint", str(docs_dir), "--format", "json", "--strict",
            "--disable", "section-placeholder",
        )

        assert code == 0
        assert json.loads(out)["findings"] == []

    def test_unknown_rule(self, capsys, docs_dir):
        code, _, err = run(capsys, "lint", str(docs_dir), "--disable", "bogus")

        assert code == 2
        assert "Unknown rule 'bogus'" in err

    def test_missing_docs_dir(self, capsys, tmp_path):
        code, _, err = run(capsys, "lint", str(tmp_path / "nope"))

        assert code == 2
        assert "not found" in err

    def test_undecodable_page(self, capsys, docs_dir, write_doc, make_doc):
        write_doc("intro.md", make_doc("Intro", 1))
        (docs_dir / "bad.md").write_bytes(b"---\ntitle: Bad\n---\n\n# Bad\n\n\xff\xfe\n")

        code, out, err = run(capsys, "lint", str(docs_dir), "--format", "json")

        assert code == 2
        assert out == ""
        assert "Could not read" in err
        assert "UTF-8" in err

    def test_with_sidebar(self, capsys, docs_dir, write_doc, make_doc, sidebar_file):
        write_doc("intro.md", make_doc("Intro", 1))

        code, out, _ = run(
            capsys, "lint", str(docs_dir), "--sidebar", str(sidebar_file), "--format", "json"
        )

        assert code == 1
        findings = json.loads(out)["findings"]
        assert [(f["rule_id"], f["path"]) for f in findings] == [
            ("sidebar-missing-doc", "sidebars.yaml")
        ]

    def test_config_file(self, capsys, tmp_path, docs_dir, write_doc, make_doc):
        write_doc("intro.md", make_doc("Intro", 1, body="TBD"))
        config = tmp_path / "audit.yaml"
        config.write_text("strict: true\n", encoding="utf-8")

        code, _, _ = run(capsys, "--config", str(config), "lint", str(docs_dir), "--format", "json")

        assert code == 1

    def test_config_discovered_in_docs_dir(self, capsys, docs_dir, write_doc, make_doc):
        write_doc("intro.md", make_doc("Intro", 1, body="TBD"))
        (docs_dir / ".docs-auditor.yaml").write_text(
            "disabled_rules: [section-placeholder]\nstrict: true\n", encoding="utf-8"
        )

        assert run(capsys, "lint", str(docs_dir), "--format", "json")[0] == 0

    def test_invalid_config(self, capsys, tmp_path, docs_dir):
        config = tmp_path / "audit.yaml"
        config.write_text("log_level: LOUD\n", encoding="utf-8")

        code, _, err = run(capsys, "--config", str(config), "lint", str(docs_dir))

        assert code == 2
        assert "Invalid configuration" in err
        assert "log_level" in err

    def test_text_output(self, capsys, docs_dir, write_doc):
        write_doc("intro.md", "# Intro\n\n```\ncode\n```\n")

        code, out, _ = run(capsys, "lint", str(docs_dir))

        assert code == 1
        assert "Audit Summary" in out
        assert "Failed" in out
        assert "intro.md" in out

    def test_subcommand_required(self):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2


class TestSidebarCommand:
    """Tests for `docs-auditor sidebar`."""

    def test_show_json(self, capsys, docs_dir, write_doc, make_doc):
        write_doc("intro.md", make_doc("Intro", 1))
        write_doc("guides/setup.md", make_doc("Setup", 1))

        code, out, _ = run(capsys, "sidebar", "show", str(docs_dir), "--format", "json")

        assert code == 0
        assert json.loads(out) == {
            "docs": [
                "intro",
                {"type": "category", "label": "guides", "items": ["guides/setup"]},
            ]
        }

    def test_show_yaml(self, capsys, docs_dir, write_doc, make_doc):
        write_doc("intro.md", make_doc("Intro", 1))

        code, out, _ = run(
            capsys, "sidebar", "show", str(docs_dir), "--format", "yaml", "--name", "main"
        )

        assert code == 0
        assert yaml.safe_load(out) == {"main": ["intro"]}

    def test_show_tree(self, capsys, docs_dir, write_doc, make_doc):
        write_doc("guides/setup.md", make_doc("Setup", 1))

        code, out, _ = run(capsys, "sidebar", "show", str(docs_dir))

        assert code == 0
        assert "guides/setup" in out

    def test_check(self, capsys, docs_dir, write_doc, make_doc, sidebar_file):
        write_doc("intro.md", make_doc("Intro", 1))
        write_doc("orphan.md", make_doc("Orphan", 2))

        code, out, _ = run(
            capsys, "sidebar", "check", str(docs_dir), "--sidebar", str(sidebar_file),
            "--format", "json",
        )

        assert code == 1
        data = json.loads(out)
        assert data["docs_dir"] == str(docs_dir)
        assert {f["rule_id"] for f in data["findings"]} == {
            "sidebar-missing-doc", "sidebar-orphan-doc"
        }

    def test_check_bad_sidebar(self, capsys, tmp_path, docs_dir):
        bad = tmp_path / "sidebars.json"
        bad.write_text("{not json", encoding="utf-8")

        code, _, err = run(capsys, "sidebar", "check", str(docs_dir), "--sidebar", str(bad))

        assert code == 2
        assert "Could not parse" in err


class TestFixCommand:
    """Tests for `docs-auditor fix`."""

    def test_dry_run_then_write(self, capsys, docs_dir, write_doc):
        path = write_doc("intro.md", "# Intro\n\n```js\nfunction a() {}\n```\n")

        code, out, _ = run(capsys, "fix", str(docs_dir))
        assert code == 1
        assert "need fixing" in out
        assert "```js\n" in path.read_text(encoding="utf-8")

        code, _, _ = run(capsys, "fix", str(docs_dir), "--write")
        assert code == 0
        assert "```js example\n" in path.read_text(encoding="utf-8")

        code, out, _ = run(capsys, "fix", str(docs_dir))
        assert code == 0
        assert "No code fences need fixing" in out

    def test_undecodable_page(self, capsys, docs_dir):
        (docs_dir / "bad.md").write_bytes(b"# Bad\n\n```\n\xff\n```\n")

        code, _, err = run(capsys, "fix", str(docs_dir), "--write")

        assert code == 2
        assert "UTF-8" in err


class TestScaffoldCommand:
    """Tests for `docs-auditor scaffold`."""

    def test_dry_run(self, capsys, docs_dir, sidebar_file):
        code, out, _ = run(
            capsys, "scaffold", str(docs_dir), "--sidebar", str(sidebar_file), "--dry-run"
        )

        assert code == 0
        assert "2 stub(s) planned" in out
        assert not any(docs_dir.iterdir())

    def test_create(self, capsys, docs_dir, write_doc, make_doc, sidebar_file):
        write_doc("intro.md", make_doc("Intro", 1))

        code, out, _ = run(capsys, "scaffold", str(docs_dir), "--sidebar", str(sidebar_file))

        assert code == 0
        assert "1 stub(s) created" in out
        created = docs_dir / "security" / "audit-logging.md"
        assert created.read_text(encoding="utf-8").startswith(
            "---\nsidebar_position: 1\ntitle: Audit Logging\n---\n"
        )

        code, out, _ = run(capsys, "scaffold", str(docs_dir), "--sidebar", str(sidebar_file))
        assert code == 0
        assert "already has a page" in out


class TestRulesCommand:
    """Tests for `docs-auditor rules`."""

    def test_lists_rules(self, capsys):
        code, out, _ = run(capsys, "rules")

        assert code == 0
        assert "front-matter-missing" in out
        assert "sidebar-order-mismatch" in out
