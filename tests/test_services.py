from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from linkshelf.core.deps import AuthenticatedUser
from linkshelf.core.errors import ConflictError, InternalError, NotFoundError, ValidationError
from linkshelf.models.link import Link, LinkTag
from linkshelf.services import link_service
from linkshelf.services.ai_service import AIContent
from linkshelf.services.ingestion_service import save_link, get_link_details, validate_url
from linkshelf.services.metadata_service import PageMetadata, fallback_metadata
from linkshelf.services.result import Ok, Degraded


def metadata_for(url, title="Title", **kwargs):
    return PageMetadata(
        title=title,
        description=kwargs.get("description", ""),
        image=kwargs.get("image"),
        domain=kwargs.get("domain", "example.com"),
        page_text=kwargs.get("page_text", ""),
    )


@pytest.fixture
def user(create_user):
    user_id, _ = create_user()
    return AuthenticatedUser(id=user_id, email="owner@test.com")


# ============ TESTS link_service.py ============

@pytest.mark.parametrize("page, limit, total, expected_pages, has_next, has_prev", [
    (1, 10, 0, 0, False, False),
    (1, 10, 10, 1, False, False),
    (1, 10, 11, 2, True, False),
    (2, 10, 11, 2, False, True),
    (3, 2, 7, 4, True, True),
])
def test_build_pagination(page, limit, total, expected_pages, has_next, has_prev):
    pagination = link_service.build_pagination(page, limit, total)
    assert pagination.total_pages == expected_pages
    assert pagination.total_links == total
    assert pagination.current_page == page
    assert pagination.has_next_page is has_next
    assert pagination.has_prev_page is has_prev


def test_create_link_keeps_tag_order(db, user):
    link = link_service.create_link(db, user.id, "https://example.com/a", metadata_for("https://example.com/a"), ["Music", "Video"])

    assert link.tags == ["Music", "Video"]
    assert db.query(LinkTag).filter(LinkTag.link_id == link.id).count() == 2


def test_create_link_unique_constraint(db, user):
    """Deux inserts de la même URL sans pre-check: la BD refuse le second"""
    url = "https://example.com/race"
    link_service.create_link(db, user.id, url, metadata_for(url), [])

    with pytest.raises(ConflictError):
        link_service.create_link(db, user.id, url, metadata_for(url), [])

    # la session reste utilisable après le rollback
    assert db.query(Link).filter(Link.user_id == user.id, Link.url == url).count() == 1


def test_get_link_scoped_by_owner(db, user, create_user):
    other_id, _ = create_user()
    link = link_service.create_link(db, user.id, "https://example.com/a", metadata_for("https://example.com/a"), [])

    assert link_service.get_link(db, user.id, link.id).id == link.id
    with pytest.raises(NotFoundError):
        link_service.get_link(db, other_id, link.id)


def test_search_by_domain_and_url(db, user):
    link_service.create_link(db, user.id, "https://github.com/x", metadata_for("", domain="github.com"), [])
    link_service.create_link(db, user.id, "https://gitlab.com/y?ref=hub", metadata_for("", domain="gitlab.com"), [])

    links, pagination = link_service.search_links(db, user.id, query_text="HUB")

    assert {link.url for link in links} == {"https://github.com/x", "https://gitlab.com/y?ref=hub"}
    assert pagination.total_links == 2


def test_search_tag_is_exact(db, user):
    link_service.create_link(db, user.id, "https://example.com/a", metadata_for(""), ["Social Media Post"])

    assert link_service.search_links(db, user.id, tag="Social")[0] == []
    assert len(link_service.search_links(db, user.id, tag="Social Media Post")[0]) == 1


def test_delete_link_removes_tags(db, user):
    link = link_service.create_link(db, user.id, "https://example.com/a", metadata_for(""), ["Blog"])
    link_id = link.id

    link_service.delete_link(db, user.id, link_id)

    assert db.query(Link).filter(Link.id == link_id).count() == 0
    assert db.query(LinkTag).filter(LinkTag.link_id == link_id).count() == 0


def test_store_fault_raises_internal_error(db, user):
    url = "https://example.com/a"
    fault = OperationalError("INSERT INTO links", {}, Exception("database is locked"))

    with patch.object(db, "commit", side_effect=fault):
        with pytest.raises(InternalError) as error:
            link_service.create_link(db, user.id, url, metadata_for(url), [])

    assert error.value.status_code == 500
    assert error.value.message == "Internal server error"
    # rollback fait, la session repart proprement
    assert db.query(Link).count() == 0

    link = link_service.create_link(db, user.id, url, metadata_for(url), [])
    with patch.object(db, "commit", side_effect=fault):
        with pytest.raises(InternalError):
            link_service.delete_link(db, user.id, link.id)


# ============ TESTS ingestion_service.py ============

@pytest.mark.parametrize("url", ["https://example.com", "http://example.com/a?b=c", "  https://example.com/x  "])
def test_validate_url_ok(url):
    assert validate_url(url) == url.strip()


@pytest.mark.parametrize("url, message", [
    (None, "URL is required"),
    ("", "URL is required"),
    ("   ", "URL is required"),
    ("example.com", "Invalid URL format"),
    ("/relative/path", "Invalid URL format"),
    ("http://[::1", "Invalid URL format"),
])
def test_validate_url_rejected(url, message):
    with pytest.raises(ValidationError) as error:
        validate_url(url)
    assert error.value.message == message


def test_save_link_pipeline(db, user):
    url = "https://www.example.com/post"
    metadata = metadata_for(url, title="Post", page_text="text", image="https://example.com/i.png")

    with patch("linkshelf.services.ingestion_service.extract_metadata", return_value=Ok(metadata)) as mock_extract, \
         patch("linkshelf.services.ingestion_service.generate_ai_content", return_value=Ok(AIContent(["Blog"], "Nice post."))) as mock_ai:
        link, summary = save_link(db, user, url)

    mock_extract.assert_called_once_with(url)
    mock_ai.assert_called_once_with("Post", "", "text", url)
    assert link.id is not None
    assert link.user_id == user.id
    assert link.title == "Post"
    assert link.image == "https://example.com/i.png"
    assert link.tags == ["Blog"]
    assert summary == "Nice post."


def test_save_link_fully_degraded(db, user):
    url = "https://down.example.com/"
    with patch("linkshelf.services.ingestion_service.extract_metadata",
               return_value=Degraded(fallback_metadata(url), reason="timeout")), \
         patch("linkshelf.services.ingestion_service.generate_ai_content",
               return_value=Degraded(AIContent(), reason="quota")):
        link, summary = save_link(db, user, url)

    assert link.title == "Unable to fetch title"
    assert link.domain == "down.example.com"
    assert link.tags == []
    assert summary == "Summary unavailable"


def test_save_link_validation_before_io(db, user):
    with patch("linkshelf.services.ingestion_service.extract_metadata") as mock_extract:
        with pytest.raises(ValidationError):
            save_link(db, user, "nope")
    mock_extract.assert_not_called()


def test_save_link_duplicate_before_io(db, user):
    url = "https://example.com/dup"
    link_service.create_link(db, user.id, url, metadata_for(url), [])

    with patch("linkshelf.services.ingestion_service.extract_metadata") as mock_extract, \
         patch("linkshelf.services.ingestion_service.generate_ai_content") as mock_ai:
        with pytest.raises(ConflictError):
            save_link(db, user, url)

    mock_extract.assert_not_called()
    mock_ai.assert_not_called()


def test_get_link_details_survives_unexpected_error(db, user):
    url = "https://example.com/a"
    link = link_service.create_link(db, user.id, url, metadata_for(url), [])

    with patch("linkshelf.services.ingestion_service.extract_metadata", side_effect=RuntimeError("boom")):
        found, summary = get_link_details(db, user, link.id)

    assert found.id == link.id
    assert summary == "Summary unavailable"
