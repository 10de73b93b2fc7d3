"""Integration tests for CLI commands against a mocked catalog API."""

from datetime import date, timedelta
from pathlib import Path

import httpx
import pytest
import respx
from typer.testing import CliRunner

from podnav.cli import app

runner = CliRunner(env={"NO_COLOR": "1", "COLUMNS": "120"})

SHOW_ID = "4rOoJ6Egrf8K2IrywzwOMk"
API = "https://api.spotify.com/v1"
TOKEN_URL = "https://accounts.spotify.com/api/token"

# 60 episodes, newest first; "Episode n" is the n-th published
EPISODE_ITEMS = [
    {
        "id": f"ep{n:04d}",
        "name": f"Episode {n}",
        "description": f"Notes for episode {n}",
        "release_date": (date(2024, 1, 1) + timedelta(days=n)).isoformat(),
        "duration_ms": 2_700_000,
        "external_urls": {"spotify": f"https://open.spotify.com/episode/ep{n:04d}"},
    }
    for n in range(60, 0, -1)
]

SHOW_PAYLOAD = {
    "id": SHOW_ID,
    "name": "History Hour",
    "publisher": "Acme Audio",
    "description": "Weekly history",
    "languages": ["en"],
    "total_episodes": len(EPISODE_ITEMS),
    "external_urls": {"spotify": f"https://open.spotify.com/show/{SHOW_ID}"},
    "images": [],
}


def serve_episodes(request: httpx.Request) -> httpx.Response:
    offset = int(request.url.params.get("offset", 0))
    limit = int(request.url.params.get("limit", 50))
    return httpx.Response(
        200, json={"items": EPISODE_ITEMS[offset : offset + limit], "total": len(EPISODE_ITEMS)}
    )


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch):
    """Point config and library files at a temp dir and provide credentials."""
    config_dir = tmp_path / "config"
    monkeypatch.setattr("podnav.config.manager.get_config_dir", lambda: config_dir)
    monkeypatch.setattr(
        "podnav.config.manager.get_config_file", lambda: config_dir / "config.yaml"
    )
    monkeypatch.setattr(
        "podnav.library.favorites.get_favorites_file", lambda: tmp_path / "favorites.json"
    )
    monkeypatch.setattr(
        "podnav.library.history.get_history_file", lambda: tmp_path / "history.json"
    )
    monkeypatch.setenv("PODNAV_CLIENT_ID", "client-id")
    monkeypatch.setenv("PODNAV_CLIENT_SECRET", "client-secret")


@pytest.fixture
def catalog():
    """Mocked catalog API serving one show."""
    with respx.mock(assert_all_called=False) as mock:
        mock.post(TOKEN_URL).mock(
            return_value=httpx.Response(200, json={"access_token": "t", "expires_in": 3600})
        )
        mock.get(f"{API}/shows/{SHOW_ID}").mock(return_value=httpx.Response(200, json=SHOW_PAYLOAD))
        mock.get(f"{API}/shows/{SHOW_ID}/episodes").mock(side_effect=serve_episodes)
        mock.get(f"{API}/search").mock(
            return_value=httpx.Response(200, json={"shows": {"items": [SHOW_PAYLOAD]}})
        )
        yield mock


class TestCLIVersion:
    """Tests for version command."""

    def test_version_command(self) -> None:
        """Test version command displays version."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "podnav" in result.stdout
        assert "0.1.0" in result.stdout


class TestCLIShows:
    """Tests for search and show commands."""

    def test_search(self, catalog) -> None:
        result = runner.invoke(app, ["search", "history"])

        assert result.exit_code == 0
        assert "History Hour" in result.stdout
        assert SHOW_ID in result.stdout

    def test_show_records_history(self, catalog) -> None:
        result = runner.invoke(app, ["show", f"https://open.spotify.com/show/{SHOW_ID}"])

        assert result.exit_code == 0
        assert "History Hour" in result.stdout
        assert "Episodes: 60" in result.stdout

        history = runner.invoke(app, ["history", "list"])
        assert "History Hour" in history.stdout

    def test_unknown_show(self, catalog) -> None:
        catalog.get(f"{API}/shows/{SHOW_ID}").mock(
            return_value=httpx.Response(404, json={"error": {"status": 404, "message": "nope"}})
        )

        result = runner.invoke(app, ["show", SHOW_ID])

        assert result.exit_code == 1
        assert "Show not found" in result.stdout

    def test_invalid_show_id(self) -> None:
        result = runner.invoke(app, ["show", "not-a-show"])

        assert result.exit_code == 1
        assert "Invalid show ID" in result.stdout

    def test_missing_credentials(self, catalog, monkeypatch) -> None:
        monkeypatch.delenv("PODNAV_CLIENT_ID")
        monkeypatch.delenv("PODNAV_CLIENT_SECRET")

        result = runner.invoke(app, ["show", SHOW_ID])

        assert result.exit_code == 1
        assert "credentials are not configured" in result.stdout


class TestCLIEpisodes:
    """Tests for the episodes command."""

    def test_page_listing(self, catalog) -> None:
        result = runner.invoke(app, ["episodes", SHOW_ID, "--page", "2", "--page-size", "20"])

        assert result.exit_code == 0
        assert "Episode 40" in result.stdout
        assert "Episode 21" in result.stdout
        assert "Episode 41" not in result.stdout
        assert "Page 2 of 3 · Showing 21-40 of 60" in result.stdout

    def test_page_past_end_is_clamped(self, catalog) -> None:
        result = runner.invoke(app, ["episodes", SHOW_ID, "-p", "9", "-s", "25"])

        assert result.exit_code == 0
        assert "Page 3 of 3 · Showing 51-60 of 60" in result.stdout

    def test_unlimited(self, catalog) -> None:
        result = runner.invoke(app, ["episodes", SHOW_ID, "--page-size", "unlimited"])

        assert result.exit_code == 0
        assert "Page 1 of 1 · Showing 1-60 of 60" in result.stdout

    def test_invalid_page_size(self) -> None:
        result = runner.invoke(app, ["episodes", SHOW_ID, "--page-size", "0"])

        assert result.exit_code == 1
        assert "Invalid page size" in result.stdout

    def test_newest_first_numbering(self, catalog) -> None:
        runner.invoke(app, ["config", "set", "browse.numbering", "newest_first"])

        result = runner.invoke(app, ["episodes", SHOW_ID, "--page-size", "5"])

        assert result.exit_code == 0
        # Newest episode is #1 under this policy
        first_row = next(line for line in result.stdout.splitlines() if "Episode 60" in line)
        assert first_row.split()[1] == "1"


class TestCLIJump:
    """Tests for the jump command."""

    def test_jump_to_episode(self, catalog) -> None:
        result = runner.invoke(app, ["jump", SHOW_ID, "5"])

        assert result.exit_code == 0
        assert "Episode #5" in result.stdout
        assert "Found via scan" in result.stdout
        assert "page 3 of the listing at 20 per page" in result.stdout

    def test_jump_with_page_size(self, catalog) -> None:
        result = runner.invoke(app, ["jump", SHOW_ID, "59", "--page-size", "10"])

        assert result.exit_code == 0
        assert "page 1 of the listing at 10 per page" in result.stdout

    def test_jump_not_found(self, catalog) -> None:
        result = runner.invoke(app, ["jump", SHOW_ID, "61"])

        assert result.exit_code == 1
        assert "Episode #61 not found" in result.stdout

    def test_jump_invalid_number(self) -> None:
        result = runner.invoke(app, ["jump", SHOW_ID, "0"])

        assert result.exit_code == 1
        assert "Episode numbers start at 1" in result.stdout


class TestCLIBrowse:
    """Tests for the browse command."""

    def test_no_show_configured(self) -> None:
        result = runner.invoke(app, ["browse"])

        assert result.exit_code == 1
        assert "No show given" in result.stdout

    def test_quit_at_first_prompt(self, catalog) -> None:
        result = runner.invoke(app, ["browse", SHOW_ID], input="quit\n")

        assert result.exit_code == 0
        assert "History Hour" in result.stdout
        assert "Page 1 of 3" in result.stdout


class TestCLIConfig:
    """Tests for config commands."""

    def test_config_show(self) -> None:
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "browse.default_page_size" in result.stdout
        assert "catalog.market" in result.stdout

    def test_config_show_masks_secret(self) -> None:
        runner.invoke(app, ["config", "set", "catalog.client_secret", "hunter2"])

        result = runner.invoke(app, ["config", "show"])

        assert "hunter2" not in result.stdout
        assert "********" in result.stdout

    def test_config_set(self) -> None:
        result = runner.invoke(app, ["config", "set", "browse.default_page_size", "50"])

        assert result.exit_code == 0
        assert "browse.default_page_size" in runner.invoke(app, ["config", "show"]).stdout

    def test_config_set_unknown_key(self) -> None:
        result = runner.invoke(app, ["config", "set", "browse.colour", "blue"])

        assert result.exit_code == 1
        assert "Unknown configuration key" in result.stdout

    def test_config_set_invalid_value(self) -> None:
        result = runner.invoke(app, ["config", "set", "browse.default_page_size", "-3"])

        assert result.exit_code == 1
        assert "Invalid value" in result.stdout


class TestCLILibrary:
    """Tests for favorites and history commands."""

    def test_favorites_round_trip(self) -> None:
        added = runner.invoke(app, ["favorites", "add", SHOW_ID, "--name", "History Hour"])
        assert added.exit_code == 0

        listed = runner.invoke(app, ["favorites", "list"])
        assert "History Hour" in listed.stdout

        removed = runner.invoke(app, ["favorites", "remove", SHOW_ID])
        assert removed.exit_code == 0
        assert "No favorites yet" in runner.invoke(app, ["favorites", "list"]).stdout

    def test_favorites_add_invalid_id(self) -> None:
        result = runner.invoke(app, ["favorites", "add", "bad", "--name", "X"])

        assert result.exit_code == 1
        assert "Invalid show ID" in result.stdout

    def test_favorites_remove_missing(self) -> None:
        result = runner.invoke(app, ["favorites", "remove", SHOW_ID])

        assert result.exit_code == 1
        assert "is not a favorite" in result.stdout

    def test_favorites_clear_requires_confirmation(self) -> None:
        runner.invoke(app, ["favorites", "add", SHOW_ID, "--name", "History Hour"])

        declined = runner.invoke(app, ["favorites", "clear"], input="n\n")
        assert "Cancelled" in declined.stdout

        cleared = runner.invoke(app, ["favorites", "clear", "--force"])
        assert "Removed 1 favorite(s)" in cleared.stdout

    def test_history_empty(self) -> None:
        result = runner.invoke(app, ["history", "list"])

        assert result.exit_code == 0
        assert "No shows opened yet" in result.stdout

    def test_history_invalid_sort(self) -> None:
        result = runner.invoke(app, ["history", "list", "--sort", "popular"])

        assert result.exit_code == 1
        assert "Unknown sort" in result.stdout
