import asyncio
import unittest

from moviedeck.core.config import PLACEHOLDER_TOKEN
from moviedeck.core.errors import ConfigurationError
from moviedeck.core.models.enums import GridStatus, NotificationLevel, ViewKind
from moviedeck.core.models.movie import MovieSummary
from moviedeck.core.notifications import Notifier
from moviedeck.core.storage import MemoryStorage
from moviedeck.services.cards import CardRenderer
from moviedeck.services.controller import (
    ALL_GENRES,
    STARTUP_FAILED,
    WATCHLIST_EMPTY,
    FilterController,
)
from moviedeck.services.watchlist import WatchlistStore

from fakes import FakeTMDb, make_settings, movie_json, page


class ControllerTestCase(unittest.IsolatedAsyncioTestCase):
    settings_overrides: dict = {}

    async def asyncSetUp(self):
        self.settings = make_settings(**self.settings_overrides)
        self.fake = FakeTMDb({
            "/search/movie": page(movie_json(10, "Batman"), movie_json(11, "Batman Returns"),
                                  movie_json(12, "Batman Begins")),
            "/discover/movie": page(movie_json(20, "Die Hard")),
        })
        self.gateway = self.fake.gateway(self.settings)
        self.notifier = Notifier()
        self.store = WatchlistStore(MemoryStorage())
        self.renderer = CardRenderer(self.store, self.notifier, self.settings.tmdb_image_base_url, delay=0)
        self.controller = FilterController(
            self.settings, self.gateway, self.store, self.renderer, self.notifier
        )

    async def asyncTearDown(self):
        self.controller.debouncer.cancel()
        await self.gateway.aclose()

    def shown_ids(self):
        return [t.movie_id for t in self.renderer.grid().tiles]

    def messages(self):
        return [n.message for n in self.notifier.history]


class TestStartup(ControllerTestCase):
    async def test_startup_loads_trending_and_genres(self):
        self.assertTrue(await self.controller.startup())
        self.assertEqual(self.shown_ids(), [1, 2])
        self.assertEqual([g.name for g in self.controller.state.genres], ["Action", "Comedy", "Science Fiction"])
        self.assertEqual(self.controller.state.view.kind, ViewKind.TRENDING)
        self.assertEqual(self.notifier.last.message, "Movie Explorer Dashboard loaded successfully!")

    async def test_startup_failure_shows_error_block(self):
        self.fake.routes["/genre/movie/list"] = (500, {"status_message": "boom"})
        self.assertFalse(await self.controller.startup())
        grid = self.renderer.grid()
        self.assertEqual(grid.status, GridStatus.MESSAGE)
        self.assertEqual(grid.message, STARTUP_FAILED)
        self.assertEqual(self.notifier.last.level, NotificationLevel.DANGER)


class TestStartupUnconfigured(ControllerTestCase):
    settings_overrides = {"tmdb_bearer_token": PLACEHOLDER_TOKEN}

    async def test_placeholder_token_blocks_before_any_request(self):
        with self.assertRaises(ConfigurationError):
            await self.controller.startup()
        self.assertEqual(self.fake.requests, [])


class TestSearch(ControllerTestCase):
    async def test_two_characters_search(self):
        self.assertTrue(await self.controller.search("ba"))
        self.assertEqual(self.fake.calls("/search/movie")[0].url.params["query"], "ba")
        self.assertEqual(self.controller.state.view.kind, ViewKind.SEARCH)
        self.assertEqual(self.controller.state.view.query, "ba")

    async def test_search_results_offer_add(self):
        await self.controller.search("batman")
        tiles = self.renderer.grid().tiles
        self.assertEqual(len(tiles), 3)
        self.assertTrue(all(t.button_label == "Add to Watch Later" for t in tiles))
        self.assertIn("Searching movies...", self.messages())
        self.assertEqual(self.notifier.last.message, 'Found 3 movie(s) for "batman"')
        self.assertEqual(self.notifier.last.scope, "view")

    async def test_single_character_is_ignored(self):
        await self.controller.startup()
        before = self.shown_ids()
        self.assertFalse(await self.controller.search("b"))
        self.assertEqual(self.fake.calls("/search/movie"), [])
        self.assertEqual(self.shown_ids(), before)

    async def test_empty_text_returns_to_trending(self):
        await self.controller.search("batman")
        self.assertTrue(await self.controller.search("   "))
        self.assertEqual(self.controller.state.view.kind, ViewKind.TRENDING)
        self.assertEqual(self.shown_ids(), [1, 2])
        self.assertEqual(len(self.fake.calls("/trending/movie/week")), 1)

    async def test_no_matches_warns(self):
        self.fake.routes["/search/movie"] = page()
        await self.controller.search("zzzz")
        self.assertEqual(self.renderer.grid().status, GridStatus.EMPTY)
        self.assertEqual(self.notifier.last.message, 'No movies found for "zzzz"')
        self.assertEqual(self.notifier.last.level, NotificationLevel.WARNING)

    async def test_search_resets_active_genre(self):
        await self.controller.select_genre(28)
        await self.controller.search("batman")
        self.assertEqual(self.controller.state.active_genre, ALL_GENRES)

    async def test_failure_keeps_previous_grid(self):
        await self.controller.startup()
        self.fake.routes["/search/movie"] = (503, {"status_message": "down"})
        self.assertFalse(await self.controller.search("batman"))
        self.assertEqual(self.shown_ids(), [1, 2])
        self.assertEqual(self.controller.state.view.kind, ViewKind.TRENDING)
        self.assertEqual(self.notifier.last.message, "Search failed. Please try again.")

    async def test_burst_of_keystrokes_triggers_one_search(self):
        for text in ("b", "ba", "bat", "batm", "batman"):
            self.controller.on_search_input(text)
            await asyncio.sleep(0.005)
        self.assertTrue(self.controller.debouncer.pending)
        await self.controller.debouncer.wait()
        calls = self.fake.calls("/search/movie")
        self.assertEqual(len(calls), 1)
        self.assertEqual(calls[0].url.params["query"], "batman")
        self.assertEqual(self.controller.state.search_text, "batman")

    async def _search_mid_render(self):
        """Start up, fire a debounced search and return once its render is in progress."""
        await self.controller.startup()
        self.renderer.delay = 0.05
        self.controller.on_search_input("batman")
        while not (self.fake.calls("/search/movie")
                   and self.renderer.grid().status is GridStatus.LOADING):
            await asyncio.sleep(0.001)

    async def test_keystroke_during_render_does_not_abort_it(self):
        await self._search_mid_render()
        self.controller.on_search_input("b")
        await self.controller.debouncer.wait()
        grid = self.renderer.grid()
        self.assertEqual(grid.status, GridStatus.TILES)
        self.assertEqual(self.shown_ids(), [10, 11, 12])
        self.assertEqual(self.controller.state.view.query, "batman")
        self.assertEqual(len(self.fake.calls("/search/movie")), 1)

    async def test_failed_follow_up_search_leaves_finished_results(self):
        await self._search_mid_render()
        self.fake.routes["/search/movie"] = (500, {"status_message": "down"})
        self.controller.on_search_input("batmobile")
        await self.controller.debouncer.wait()
        self.assertEqual(self.renderer.grid().status, GridStatus.TILES)
        self.assertEqual(self.shown_ids(), [10, 11, 12])
        self.assertIn("Search failed. Please try again.", self.messages())

    async def test_submit_skips_debounce(self):
        self.controller.on_search_input("bat")
        self.assertTrue(await self.controller.submit_search("batman"))
        self.assertFalse(self.controller.debouncer.pending)
        calls = self.fake.calls("/search/movie")
        self.assertEqual([c.url.params["query"] for c in calls], ["batman"])

    async def test_stale_search_response_is_discarded(self):
        gate = asyncio.Event()
        self.fake.gates["/search/movie"] = gate
        slow = asyncio.create_task(self.controller.search("batman"))
        while not self.fake.calls("/search/movie"):
            await asyncio.sleep(0)

        await self.controller.select_genre(28)
        gate.set()
        self.assertFalse(await slow)
        self.assertEqual(self.shown_ids(), [20])
        self.assertEqual(self.controller.state.view.kind, ViewKind.GENRE)


class TestGenres(ControllerTestCase):
    async def asyncSetUp(self):
        await super().asyncSetUp()
        await self.controller.startup()

    async def test_select_genre(self):
        self.assertTrue(await self.controller.select_genre(28))
        self.assertEqual(self.controller.state.active_genre, 28)
        self.assertEqual(self.controller.state.view.genre_id, 28)
        self.assertEqual(self.shown_ids(), [20])
        self.assertEqual(self.notifier.last.message, "Showing Action movies")
        self.assertEqual(self.fake.calls("/discover/movie")[0].url.params["with_genres"], "28")

    async def test_genre_accepts_string_ids(self):
        await self.controller.select_genre("35")
        self.assertEqual(self.controller.state.active_genre, 35)
        self.assertEqual(self.notifier.last.message, "Showing Comedy movies")

    async def test_unknown_genre_name(self):
        await self.controller.select_genre(9999)
        self.assertEqual(self.notifier.last.message, "Showing Unknown movies")

    async def test_all_returns_to_trending(self):
        await self.controller.select_genre(28)
        self.assertTrue(await self.controller.select_genre(ALL_GENRES))
        self.assertEqual(self.controller.state.active_genre, ALL_GENRES)
        self.assertEqual(self.controller.state.view.kind, ViewKind.TRENDING)
        self.assertEqual(self.shown_ids(), [1, 2])

    async def test_genre_clears_search_text_and_pending_search(self):
        self.controller.on_search_input("batman")
        await self.controller.select_genre(28)
        self.assertEqual(self.controller.state.search_text, "")
        self.assertFalse(self.controller.debouncer.pending)
        await asyncio.sleep(self.settings.search_debounce_seconds * 2)
        self.assertEqual(self.fake.calls("/search/movie"), [])

    async def test_failure_restores_previous_genre(self):
        await self.controller.select_genre(35)
        self.fake.routes["/discover/movie"] = (500, {})
        self.assertFalse(await self.controller.select_genre(28))
        self.assertEqual(self.controller.state.active_genre, 35)
        self.assertEqual(self.notifier.last.message, "Failed to load movies. Please try again.")


class TestWatchlistView(ControllerTestCase):
    async def asyncSetUp(self):
        await super().asyncSetUp()
        await self.controller.startup()

    async def test_empty_watchlist_shows_message_without_toast(self):
        before = len(self.notifier.history)
        self.assertTrue(await self.controller.toggle_watchlist_view())
        self.assertTrue(self.controller.in_watchlist_view)
        grid = self.renderer.grid()
        self.assertEqual(grid.status, GridStatus.EMPTY)
        self.assertEqual(grid.message, WATCHLIST_EMPTY)
        self.assertEqual(len(self.notifier.history), before)

    async def test_shows_stored_movies_then_toggles_back(self):
        self.store.add(MovieSummary(id=42, title="Dune", poster_path="/d.jpg"))
        await self.controller.select_genre(28)
        await self.controller.toggle_watchlist_view()
        self.assertEqual(self.shown_ids(), [42])
        self.assertEqual(self.renderer.grid().tiles[0].button_label, "Remove from Watch Later")
        self.assertEqual(self.controller.state.active_genre, ALL_GENRES)
        self.assertEqual(self.notifier.last.message, "Showing 1 movie(s) from your Watch Later list")

        await self.controller.toggle_watchlist_view()
        self.assertFalse(self.controller.in_watchlist_view)
        self.assertEqual(self.controller.state.view.kind, ViewKind.TRENDING)

    async def test_go_home(self):
        await self.controller.select_genre(28)
        self.assertTrue(await self.controller.go_home())
        self.assertEqual(self.controller.state.view.kind, ViewKind.TRENDING)
        self.assertEqual(self.controller.state.active_genre, ALL_GENRES)
        self.assertEqual(self.notifier.last.message, "Showing trending movies")


if __name__ == "__main__":
    unittest.main()
