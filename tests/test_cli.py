"""Smoke tests for the CLI."""

from datetime import UTC, datetime
from pathlib import Path

import pytest
from typer.testing import CliRunner

from republish import __version__
from republish.cli import app
from republish.content.models import ContentItem
from republish.content.store import ContentStore


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep stray config files and env vars out of the CLI's config."""
    monkeypatch.chdir(tmp_path)
    for key in ("REPUBLISH_ENDPOINT", "REPUBLISH_STORE_DIR"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("REPUBLISH_SITE_URL", "https://x.test")


@pytest.fixture
def store_dir(tmp_path: Path) -> Path:
    """Create a content store with one article."""
    directory = tmp_path / "store"
    store = ContentStore(directory)
    store.upsert(
        ContentItem(
            id=1,
            slug="hello",
            title="Hello",
            body="<p>World</p>",
            published_at=datetime(2024, 1, 15, 12, 0, tzinfo=UTC),
            canonical_url="https://x.test/2024/01/hello/",
        )
    )
    return directory


class TestCLI:
    """Tests for the CLI entry point."""

    def test_main_help(self, runner: CliRunner) -> None:
        """Test that --help works on the main command."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "republish" in result.output.lower()

    def test_main_version(self, runner: CliRunner) -> None:
        """Test that --version shows the version."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestSnippetCommand:
    """Tests for the snippet command."""

    def test_prints_snippet(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "snippet", "1"])
        assert result.exit_code == 0
        assert "<h1>Hello</h1>" in result.output
        assert "<time>Jan 15 12:00pm UTC</time>" in result.output
        assert '<link rel="canonical" href="https://x.test/2024/01/hello/" />' in result.output
        assert "republication-pixel?post=1" in result.output

    def test_unknown_id_fails(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "snippet", "42"])
        assert result.exit_code == 1
        assert "Invalid post ID" in result.output


class TestResolveCommand:
    """Tests for the resolve command."""

    def test_render(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "resolve", "2024/01/hello/"])
        assert result.exit_code == 0
        assert "render" in result.output
        assert "article 1" in result.output

    def test_redirect_after_opt_out(self, runner: CliRunner, store_dir: Path) -> None:
        runner.invoke(app, ["--store", str(store_dir), "opt-out", "1"])
        result = runner.invoke(app, ["--store", str(store_dir), "resolve", "hello"])
        assert result.exit_code == 0
        assert "redirect" in result.output
        assert "https://x.test/2024/01/hello/" in result.output

    def test_not_found(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "resolve", "nope"])
        assert result.exit_code == 1
        assert "404" in result.output


class TestLinkCommand:
    """Tests for the link command."""

    def test_prints_republish_url(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "link", "1"])
        assert result.exit_code == 0
        assert result.output.strip() == "https://x.test/republish/2024/01/hello/"

    def test_unknown_id_fails(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "link", "7"])
        assert result.exit_code == 1


class TestOptOutCommand:
    """Tests for the opt-out command."""

    def test_disable_and_allow(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "opt-out", "1"])
        assert result.exit_code == 0
        assert "Republication disabled for article 1" in result.output
        assert ContentStore(store_dir).get(1).republish_disabled is True

        result = runner.invoke(app, ["--store", str(store_dir), "opt-out", "1", "--allow"])
        assert result.exit_code == 0
        assert "Republication allowed for article 1" in result.output
        assert ContentStore(store_dir).get(1).republish_disabled is False

    def test_unknown_id_fails(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "opt-out", "9"])
        assert result.exit_code == 1
        assert "Invalid post ID" in result.output


class TestSharesCommand:
    """Tests for the shares command."""

    def test_no_shares_yet(self, runner: CliRunner, store_dir: Path) -> None:
        result = runner.invoke(app, ["--store", str(store_dir), "shares", "1"])
        assert result.exit_code == 0
        assert "republished 0 time(s)" in result.output

    def test_lists_urls(self, runner: CliRunner, store_dir: Path) -> None:
        ContentStore(store_dir).record_share(1, "https://partner.test/a")
        result = runner.invoke(app, ["--store", str(store_dir), "shares", "1"])
        assert result.exit_code == 0
        assert "republished 1 time(s)" in result.output
        assert "https://partner.test/a" in result.output
