"""Tests for the shared drive operations."""

import pytest

from graphdrive.clients.drive_operations import DriveOperations
from graphdrive.core.exceptions import PermissionNotFoundError

ITEM = "/me/drive/items/item-1"

PERMISSIONS = {
    "value": [
        {"id": "owner", "roles": ["owner"], "grantedTo": {"user": {"displayName": "Me"}}},
        {"id": "perm-a", "roles": ["read"], "invitation": {"email": "a@b.com"}},
        {"id": "perm-c", "roles": ["write"], "invitation": {"email": "c@d.com"}},
        {"id": "link-1", "roles": ["read"], "link": {"type": "view", "scope": "anonymous"}},
    ]
}


@pytest.fixture
def drive(graph_api):
    """Create drive operations over the test pipeline."""
    return DriveOperations(graph_api)


# ============================================================================
# Unsharing
# ============================================================================


@pytest.mark.asyncio
async def test_unshare_by_email_deletes_only_the_matching_permission(drive, recorder):
    """Test that exactly the invitee's permission is deleted."""
    recorder.queue(200, PERMISSIONS).queue(204)

    await drive.unshare_from(ITEM, "a@b.com")

    assert len(recorder.requests) == 2
    listing, deletion = recorder.requests
    assert listing.method == "GET"
    assert listing.url.path.endswith("/me/drive/items/item-1/permissions")
    assert deletion.method == "DELETE"
    assert deletion.url.path.endswith("/me/drive/items/item-1/permissions/perm-a")


@pytest.mark.asyncio
async def test_unshare_without_email_deletes_the_link_permission(drive, recorder):
    """Test that a link permission without invitation is matched."""
    recorder.queue(200, PERMISSIONS).queue(204)

    await drive.unshare_from(ITEM)

    assert recorder.requests[1].url.path.endswith("/permissions/link-1")


@pytest.mark.asyncio
async def test_unshare_without_match_raises_permission_not_found(drive, recorder):
    """Test that a failed lookup is a domain error and deletes nothing."""
    recorder.queue(200, PERMISSIONS)

    with pytest.raises(PermissionNotFoundError) as exc_info:
        await drive.unshare_from(ITEM, "nobody@b.com")

    assert exc_info.value.email == "nobody@b.com"
    assert exc_info.value.item_path == ITEM
    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_unshare_link_ignores_links_with_invitations(drive, recorder):
    """Test that invited link permissions are not treated as anonymous links."""
    recorder.queue(
        200,
        {"value": [{"id": "x", "link": {"type": "view"}, "invitation": {"email": "a@b.com"}}]},
    )

    with pytest.raises(PermissionNotFoundError):
        await drive.unshare_from(ITEM)


@pytest.mark.asyncio
async def test_unshare_skips_matches_without_an_id(drive, recorder):
    """Test that a matching permission without an id is not deletable."""
    recorder.queue(200, {"value": [{"roles": ["read"], "invitation": {"email": "a@b.com"}}]})

    with pytest.raises(PermissionNotFoundError):
        await drive.unshare_from(ITEM, "a@b.com")

    assert len(recorder.requests) == 1


@pytest.mark.asyncio
async def test_unshare_permission_deletes_by_id(drive, recorder):
    """Test direct deletion by permission identifier."""
    recorder.queue(204)

    await drive.unshare_permission(ITEM, "perm-9")

    assert recorder.requests[0].method == "DELETE"
    assert recorder.requests[0].url.path.endswith("/permissions/perm-9")


# ============================================================================
# Sharing
# ============================================================================


@pytest.mark.asyncio
async def test_share_for_email_posts_silent_invitation(drive, recorder):
    """Test the invitation body."""
    recorder.queue(200, {"value": [{"id": "perm-a"}]})

    assert await drive.share_for_email(ITEM, "a@b.com") is True

    assert recorder.requests[0].url.path.endswith("/item-1/invite")
    assert recorder.json_body() == {
        "requireSignIn": True,
        "sendInvitation": False,
        "roles": ["read"],
        "recipients": [{"email": "a@b.com"}],
    }


@pytest.mark.asyncio
async def test_create_share_link(drive, recorder):
    """Test anonymous link creation."""
    recorder.queue(201, {"id": "link-1", "link": {"webUrl": "https://1drv.ms/x"}})

    permission = await drive.create_share_link(ITEM)

    assert permission["link"]["webUrl"] == "https://1drv.ms/x"
    assert recorder.json_body() == {"type": "view", "scope": "anonymous"}


# ============================================================================
# Listing and reading
# ============================================================================


@pytest.mark.asyncio
async def test_get_files_from_builds_query_and_normalizes(drive, recorder):
    """Test the children listing URL and the normalized page."""
    recorder.queue(
        200,
        {
            "value": [{"id": "f", "name": "docs", "folder": {"childCount": 0}}],
            "@odata.nextLink": "https://graph.microsoft.com/v1.0/x?$skiptoken=next",
        },
    )

    page = await drive.get_files_from(
        ITEM, fields=["name"], expand=["thumbnails"], options={"$top": 50}, cursor="prev"
    )

    url = recorder.requests[0].url
    assert url.path.endswith("/me/drive/items/item-1/children")
    assert url.params["$select"] == "name,id"
    assert url.params["$expand"] == "thumbnails"
    assert url.params["$top"] == "50"
    assert url.params["$skiptoken"] == "prev"
    assert page.cursor == "next"
    assert page.items[0].is_folder is True


@pytest.mark.asyncio
async def test_get_files_from_without_options_has_no_query(drive, recorder):
    """Test that a bare listing sends no query string."""
    recorder.queue(200, {"value": []})

    await drive.get_files_from(ITEM)

    assert recorder.requests[0].url.query == b""


@pytest.mark.asyncio
async def test_get_file_by_id(drive, recorder):
    """Test the single-item shape."""
    recorder.queue(200, {"name": "a.txt", "webUrl": "https://x/a.txt"})

    item = await drive.get_file_by_id(ITEM)

    assert item.name == "a.txt"
    assert item.web_url == "https://x/a.txt"
    assert item.package_type == ""


@pytest.mark.asyncio
async def test_get_preview_returns_thumbnail_sets(drive, recorder):
    """Test that thumbnails are unwrapped from value."""
    recorder.queue(200, {"value": [{"id": "0", "small": {"url": "https://x/s"}}]})

    preview = await drive.get_preview(ITEM)

    assert preview == [{"id": "0", "small": {"url": "https://x/s"}}]
    assert recorder.requests[0].url.path.endswith("/item-1/thumbnails")


# ============================================================================
# Creation and upload
# ============================================================================


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "requested, sent",
    [("fail", "fail"), ("replace", "replace"), ("rename", "rename"), ("bogus", "rename")],
)
async def test_create_folder_conflict_behavior(drive, recorder, requested, sent):
    """Test conflict behavior, with unknown values falling back to rename."""
    recorder.queue(201, {"id": "new", "name": "docs", "folder": {}})

    item = await drive.create_folder(ITEM, "docs", requested)

    assert recorder.json_body() == {
        "name": "docs",
        "folder": {},
        "@microsoft.graph.conflictBehavior": sent,
    }
    assert item.is_folder is True


@pytest.mark.asyncio
async def test_upload_file_puts_content_with_conflict_behavior(drive, recorder):
    """Test the simple upload URL, body and query."""
    recorder.queue(201, {"id": "file-1", "name": "report.txt", "file": {}})

    item = await drive.upload_file(ITEM, "report.txt", b"hello", "replace")

    request = recorder.requests[0]
    assert request.method == "PUT"
    assert request.url.path.endswith("/me/drive/items/item-1:/report.txt:/content")
    assert request.url.params["@microsoft.graph.conflictBehavior"] == "replace"
    assert request.content == b"hello"
    assert request.headers["Content-Type"] == "application/octet-stream"
    assert item.id == "file-1"
    assert item.is_folder is False
