"""Tests for the search client."""

import base64
import json
from unittest.mock import MagicMock

import pytest

from graphdrive.clients.search import SearchClient, parse_sort_properties
from graphdrive.cursors.search import SearchCursor, decode_cursor, encode_cursor


def search_response(hits, more=False):
    """Build a search API response."""
    return {
        "value": [
            {
                "searchTerms": ["report"],
                "hitsContainers": [
                    {
                        "hits": [{"hitId": h["id"], "resource": h} for h in hits],
                        "total": 100,
                        "moreResultsAvailable": more,
                    }
                ],
            }
        ]
    }


@pytest.fixture
def search(graph_api):
    """Create a search client over the test pipeline."""
    return SearchClient(graph_api)


@pytest.mark.asyncio
async def test_first_page_request_body(search, recorder):
    """Test the request shape of a first search page."""
    recorder.queue(200, search_response([]))

    await search.search(query="report", sort_properties="createdDateTime DESC, name ASC")

    assert recorder.requests[0].url.path == "/v1.0/search/query"
    assert recorder.json_body() == {
        "requests": [
            {
                "entityTypes": ["driveItem"],
                "query": {"queryString": "report"},
                "sortProperties": [
                    {"name": "createdDateTime", "isDescending": True},
                    {"name": "name", "isDescending": False},
                ],
                "from": 0,
                "size": 25,
            }
        ]
    }


@pytest.mark.asyncio
async def test_unset_values_are_not_sent(search, recorder):
    """Test that sort properties are omitted when not requested."""
    recorder.queue(200, search_response([]))

    await search.search()

    body = recorder.json_body()["requests"][0]
    assert "sortProperties" not in body
    assert body["query"] == {"queryString": ""}


@pytest.mark.asyncio
async def test_size_is_capped(search, recorder):
    """Test that page size never exceeds 25."""
    recorder.queue(200, search_response([]))

    await search.search(query="x", max_results=500)

    assert recorder.json_body()["requests"][0]["size"] == 25


@pytest.mark.asyncio
async def test_fields_are_selected_with_id(search, recorder):
    """Test the select clause of a search."""
    recorder.queue(200, search_response([]))

    await search.search(query="x", fields=["name", "webUrl"])

    assert recorder.requests[0].url.params["$select"] == "name,webUrl,id"


@pytest.mark.asyncio
async def test_more_results_yield_next_page_cursor(search, recorder):
    """Test that the cursor encodes the next page's request state."""
    recorder.queue(200, search_response([{"id": "1", "name": "a"}], more=True))

    page = await search.search(query="x", max_results=10, sort_properties="name ASC")

    assert [item.id for item in page.items] == ["1"]
    assert decode_cursor(page.cursor) == SearchCursor(
        from_=10, size=10, sort_properties=[{"name": "name", "isDescending": False}]
    )


@pytest.mark.asyncio
async def test_last_page_has_no_cursor(search, recorder):
    """Test that no cursor is returned without more results."""
    recorder.queue(200, search_response([{"id": "1"}], more=False))

    page = await search.search(query="x")

    assert page.cursor is None


@pytest.mark.asyncio
async def test_cursor_drives_the_next_request(search, recorder):
    """Test that paging state is reconstructed from the cursor alone."""
    cursor = encode_cursor(
        SearchCursor(from_=50, size=25, sort_properties=[{"name": "name", "isDescending": True}])
    )
    recorder.queue(200, search_response([]))

    await search.search(query="x", sort_properties="createdDateTime ASC", cursor=cursor)

    body = recorder.json_body()["requests"][0]
    assert body["from"] == 50
    assert body["size"] == 25
    assert body["sortProperties"] == [{"name": "name", "isDescending": True}]


@pytest.mark.asyncio
async def test_oversized_cursor_page_is_capped(search, recorder):
    """Test that a hand-built cursor cannot raise the page size past 25."""
    cursor = base64.urlsafe_b64encode(json.dumps({"from": 0, "size": 500}).encode()).decode()
    recorder.queue(200, search_response([{"id": "1"}], more=True))

    page = await search.search(query="x", cursor=cursor)

    assert recorder.json_body()["requests"][0]["size"] == 25
    assert decode_cursor(page.cursor) == SearchCursor(from_=25, size=25)


@pytest.mark.asyncio
async def test_malformed_cursor_restarts_from_first_page(search, recorder):
    """Test that a malformed cursor is treated as no cursor."""
    recorder.queue(200, search_response([]))

    await search.search(query="x", cursor="@@garbage@@")

    assert recorder.json_body()["requests"][0]["from"] == 0


@pytest.mark.asyncio
async def test_malformed_cursor_is_logged_on_the_client_logger(graph_api, recorder):
    """Test that the ignored cursor is reported through the client's own logger."""
    logger = MagicMock()
    logger.with_context.return_value = logger
    search = SearchClient(graph_api, logger=logger)
    recorder.queue(200, search_response([]))

    await search.search(query="x", cursor="@@garbage@@")

    assert any(
        "Ignoring malformed search cursor" in call.args[0] for call in logger.debug.call_args_list
    )


@pytest.mark.asyncio
async def test_empty_response_is_an_empty_final_page(search, recorder):
    """Test tolerance of responses without hit containers."""
    recorder.queue(200, {"value": []})

    page = await search.search(query="x")

    assert page.items == []
    assert page.cursor is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        ("", None),
        ("name", [{"name": "name", "isDescending": False}]),
        ("name desc", [{"name": "name", "isDescending": True}]),
        (
            "lastModifiedDateTime DESC,name ASC",
            [
                {"name": "lastModifiedDateTime", "isDescending": True},
                {"name": "name", "isDescending": False},
            ],
        ),
    ],
)
def test_parse_sort_properties(raw, expected):
    """Test the sort clause parser."""
    assert parse_sort_properties(raw) == expected
