"""
Tests for the Paginator.
"""

from unittest.mock import MagicMock

import pytest

from search.errors import ProviderError
from search.paginator import Paginator

from fakes import ScriptedProvider


def collect(provider, query="coffee", **kwargs):
    kwargs.setdefault("page_delay", 0)
    return list(Paginator(provider, query, **kwargs))


class TestPaginatorTermination:
    """Tests for the Paginator stop conditions."""

    def test_stops_after_short_page(self):
        provider = ScriptedProvider([10, 10, 5, 10])
        pages = collect(provider)
        assert [p.page for p in pages] == [1, 2, 3]
        assert provider.pages_requested() == [0, 1, 2]

    def test_empty_first_page_yields_nothing(self):
        provider = ScriptedProvider([0])
        assert collect(provider) == []
        assert provider.pages_requested() == [0]

    @pytest.mark.parametrize(
        "batches",
        [[10, 7, 3, 0], [5, 0], [9, 8, 7, 6, 5, 4, 3, 2, 1, 0]],
    )
    def test_page_count_equals_non_empty_batches(self, batches):
        provider = ScriptedProvider(batches, maps_style=True)
        pages = collect(provider)
        assert len(pages) == sum(1 for b in batches if b)
        assert provider.pages_requested() == list(range(len(batches)))

    def test_full_pages_then_empty(self):
        provider = ScriptedProvider([10, 10, 0])
        pages = collect(provider)
        assert len(pages) == 2
        assert provider.pages_requested() == [0, 1, 2]

    def test_positions_are_absolute(self):
        pages = collect(ScriptedProvider([10, 10, 2]))
        positions = [item.position for page in pages for item in page.items]
        assert positions == list(range(1, 23))

    def test_options_forwarded(self):
        provider = MagicMock()
        provider.search.return_value = MagicMock(items=[], has_more_pages=False)
        collect(provider, location="Singapore", language="en", ll="@1,2,3z")
        provider.search.assert_called_once_with(
            "coffee", page=0, location="Singapore", language="en", ll="@1,2,3z"
        )

    def test_single_use(self):
        paginator = Paginator(ScriptedProvider([3]), "coffee", page_delay=0)
        assert len(list(paginator)) == 1
        assert list(paginator) == []


class TestPaginatorFailures:
    """Tests for Paginator handling of provider failures."""

    def test_search_style_yields_error_page_and_stops(self):
        provider = ScriptedProvider([10, ProviderError("HTTP 500: oops"), 10])
        pages = collect(provider)

        assert len(pages) == 2
        error_page = pages[1]
        assert error_page.error == "HTTP 500: oops"
        assert error_page.page == 2
        assert error_page.has_more_pages is False
        assert len(error_page.items) == 1
        assert error_page.items[0].error == "HTTP 500: oops"
        assert error_page.items[0].position == 11
        assert provider.pages_requested() == [0, 1]

    def test_search_style_first_page_failure(self):
        pages = collect(ScriptedProvider([ProviderError("down")]))
        assert len(pages) == 1
        assert pages[0].is_error

    def test_maps_style_later_failure_is_end_of_results(self):
        provider = ScriptedProvider([10, 10, ProviderError("HTTP 400")], maps_style=True)
        pages = collect(provider)
        assert len(pages) == 2
        assert not any(p.is_error for p in pages)
        assert provider.pages_requested() == [0, 1, 2]

    def test_maps_style_first_page_failure_raises(self):
        provider = ScriptedProvider([ProviderError("HTTP 401")], maps_style=True)
        with pytest.raises(ProviderError):
            collect(provider)

    def test_unexpected_errors_propagate(self):
        provider = ScriptedProvider([10, RuntimeError("bug")])
        with pytest.raises(RuntimeError):
            collect(provider)


class TestPageDelay:
    """Tests for pacing between page requests."""

    def test_delay_between_pages(self, monkeypatch):
        sleep = MagicMock()
        monkeypatch.setattr("search.paginator.time.sleep", sleep)

        collect(ScriptedProvider([10, 10, 3]), page_delay=1.5)

        assert sleep.call_count == 2
        sleep.assert_called_with(1.5)

    def test_no_delay_when_consumer_stops(self, monkeypatch):
        sleep = MagicMock()
        monkeypatch.setattr("search.paginator.time.sleep", sleep)
        provider = ScriptedProvider([10, 10, 10])

        for _ in Paginator(provider, "coffee", page_delay=1.0):
            break

        sleep.assert_not_called()
        assert provider.pages_requested() == [0]

    def test_zero_delay_never_sleeps(self, monkeypatch):
        sleep = MagicMock()
        monkeypatch.setattr("search.paginator.time.sleep", sleep)
        collect(ScriptedProvider([10, 10, 0]), page_delay=0)
        sleep.assert_not_called()
