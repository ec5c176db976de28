"""
Unit tests for the versioned clients and the generated operation groups.
"""

import urllib.parse

import pytest

from photoshelter import (
    NotFoundError,
    PhotoShelterV3,
    PhotoShelterV4,
    RequestFailedError,
    UnauthenticatedError,
    ValidationError,
)
from photoshelter.core.catalog import V3_ENDPOINTS, V4_ENDPOINTS


def _path_args(endpoint):
    return ["x" for _ in endpoint.path_fields]


# =============================================================================
# Catalogue
# =============================================================================


def test_catalogue_rows_are_unique_per_group():
    for table in (V3_ENDPOINTS, V4_ENDPOINTS):
        keys = [(e.group, e.name) for e in table]
        assert len(keys) == len(set(keys))


def test_catalogue_methods_are_known():
    for endpoint in (*V3_ENDPOINTS, *V4_ENDPOINTS):
        assert endpoint.method in ("GET", "POST", "PUT", "PATCH", "DELETE")
        assert endpoint.path.startswith("/")


def test_v4_exposes_every_group_of_the_remote_api():
    client = PhotoShelterV4(api_key="k")
    assert client.group_names == [
        "collections",
        "contacts",
        "embed_tokens",
        "faces",
        "galleries",
        "integrations",
        "library",
        "media",
        "media_versions",
        "ml_metadata",
        "metadata",
        "oauth",
        "organization",
        "people",
        "portal",
        "permissions",
        "resource_tickets",
        "search",
        "settings",
        "squirrel",
        "trash",
        "two_factor",
        "user",
        "users",
        "version",
        "workspaces",
    ]
    assert "restore" in client.trash
    assert "search" in client.galleries
    assert "update" not in client.galleries


def test_describe_lists_params():
    client = PhotoShelterV4(api_key="k")
    (create,) = [d for d in client.contacts.describe() if d["name"] == "create"]
    assert create == {
        "group": "contacts",
        "name": "create",
        "method": "POST",
        "path": "/contacts",
        "params": {"name": "required", "email": "required", "phone": "optional"},
        "description": "Create a contact",
    }
    assert len(client.describe()) == len(V4_ENDPOINTS)


# =============================================================================
# Authentication precondition
# =============================================================================


@pytest.mark.parametrize("endpoint", V4_ENDPOINTS, ids=lambda e: f"{e.group}.{e.name}")
def test_every_v4_operation_requires_login(v4, network, endpoint):
    operation = getattr(getattr(v4, endpoint.group), endpoint.name)
    with pytest.raises(UnauthenticatedError):
        operation(*_path_args(endpoint))
    assert network.requests == []


@pytest.mark.parametrize("endpoint", V3_ENDPOINTS, ids=lambda e: f"{e.group}.{e.name}")
def test_every_v3_operation_requires_login(v3, network, endpoint):
    operation = getattr(getattr(v3, endpoint.group), endpoint.name)
    with pytest.raises(UnauthenticatedError):
        operation(*_path_args(endpoint))
    assert network.requests == []


def test_login_token_is_sent_on_later_calls(logged_in_v4, network):
    logged_in_v4.media.get_all()
    assert network.last.get_header("X-ps-auth-token") == "tok-v4"
    assert logged_in_v4.auth.session.organization_id == "O123"
    assert logged_in_v4.authenticate is logged_in_v4.auth


def test_login_without_org_sends_no_org_id(v4, network):
    network.respond(body={"token": "t"})
    v4.auth.login("me@example.com", "pw")
    assert "org_id" not in urllib.parse.parse_qs(network.last.data.decode())


def test_logout_ends_the_session(logged_in_v4, network):
    sent = len(network.requests)
    logged_in_v4.auth.logout()

    assert len(network.requests) == sent
    assert not logged_in_v4.auth.is_authenticated
    with pytest.raises(UnauthenticatedError):
        logged_in_v4.media.get_all()


# =============================================================================
# Operations
# =============================================================================


def test_get_operation_sends_query_params(logged_in_v4, network):
    network.respond(body={"data": [], "meta": {"total": 0}})

    result = logged_in_v4.collections.search(query="black & white", page=2)

    url = urllib.parse.urlsplit(network.last.full_url)
    assert url.path == "/psapi/v4.0/collections/search"
    assert "query=black+%26+white" in url.query
    assert "page=2" in url.query
    assert result == {"data": [], "meta": {"total": 0}}


def test_get_operation_keeps_empty_string_params(logged_in_v4, network):
    logged_in_v4.search.search_all(query="")
    assert network.last.full_url.endswith("/search?query=")


def test_params_dict_and_keywords_are_merged(logged_in_v4, network):
    logged_in_v4.galleries.get_all(params={"page": 1}, per_page=50)
    query = urllib.parse.parse_qs(urllib.parse.urlsplit(network.last.full_url).query)
    assert query == {"page": ["1"], "per_page": ["50"]}


def test_path_arguments_are_interpolated_and_quoted(logged_in_v4, network):
    logged_in_v4.media.get_by_id("M 1/2")
    assert network.last.full_url == "https://www.photoshelter.com/psapi/v4.0/media/M%201%2F2"


def test_path_argument_by_keyword(logged_in_v3, network):
    logged_in_v3.galleries.remove_image(gallery_id="G1", image_id="I2")
    assert network.last.full_url.endswith("/psapi/v3/mem/gallery/G1/image-link/I2")
    assert network.last.get_method() == "DELETE"


def test_missing_path_argument_fails_before_network(logged_in_v4, network):
    sent = len(network.requests)
    with pytest.raises(ValidationError, match="requires 'id'"):
        logged_in_v4.media.update(name="x")
    with pytest.raises(ValidationError, match="takes 1 path argument"):
        logged_in_v4.media.get_by_id("a", "b")
    assert len(network.requests) == sent


def test_write_operation_sends_params_in_query_string(logged_in_v4, network):
    network.respond(status=201, reason="Created", body={"id": "C1"})

    result = logged_in_v4.contacts.update("C1", name="Ada", phone="555")

    req = network.last
    assert req.get_method() == "PUT"
    assert req.full_url == "https://www.photoshelter.com/psapi/v4.0/contacts/C1?name=Ada&phone=555"
    assert req.data is None
    assert result == {"id": "C1"}


def test_post_without_params_sends_nothing_extra(logged_in_v4, network):
    logged_in_v4.trash.restore("T1")
    assert network.last.get_method() == "POST"
    assert network.last.data is None
    assert network.last.full_url.endswith("/trash/T1/restore")


def test_create_sends_params_like_a_query(logged_in_v4, network):
    logged_in_v4.contacts.create(name="Ada", email="a&b@x.com")

    query = urllib.parse.parse_qs(urllib.parse.urlsplit(network.last.full_url).query)
    assert network.last.get_method() == "POST"
    assert query == {"name": ["Ada"], "email": ["a&b@x.com"]}
    assert "email=a%26b%40x.com" in network.last.full_url


def test_reserved_keyword_names_go_through_params(logged_in_v4, network):
    logged_in_v4.media.get_all(params={"method": "upload", "timeout": "30"})

    query = urllib.parse.parse_qs(urllib.parse.urlsplit(network.last.full_url).query)
    assert network.last.get_method() == "GET"
    assert query == {"method": ["upload"], "timeout": ["30"]}


def test_method_override(logged_in_v4, network):
    logged_in_v4.settings.update(method="PATCH", theme="dark")
    assert network.last.get_method() == "PATCH"
    assert network.last.full_url.endswith("/settings?theme=dark")


def test_v4_download_returns_raw_bytes(logged_in_v4, network):
    payload = bytes(range(256))
    network.respond(body=payload)
    assert logged_in_v4.media.get_by_id("M1") == payload


def test_v3_unwraps_data_envelope(logged_in_v3, network):
    network.respond(body={"status": "ok", "data": {"id": "abc"}, "meta": {"total": 1}})
    assert logged_in_v3.galleries.get_by_id("G1") == {"id": "abc"}


def test_v3_binary_download_returns_bytes(logged_in_v3, network):
    network.respond(body=b"\xff\xd8\xff\xe0JFIF")
    assert logged_in_v3.images.download("I1", download_type="original") == b"\xff\xd8\xff\xe0JFIF"
    assert network.last.full_url.endswith("/mem/image/I1/download?download_type=original")


def test_errors_surface_from_operations(logged_in_v4, network):
    network.respond(status=404, reason="Not Found")
    with pytest.raises(NotFoundError, match="Not Found"):
        logged_in_v4.media.get_by_id("missing")

    network.respond(
        status=400,
        reason="Bad Request",
        body={"errors": [{"title": "Invalid field"}, {"title": "Missing param"}]},
    )
    with pytest.raises(RequestFailedError, match="Invalid field \\| Missing param"):
        logged_in_v4.contacts.create(name="")


def test_call_reaches_uncatalogued_paths(logged_in_v3, network):
    network.respond(body={"status": "ok", "data": [1, 2]})
    assert logged_in_v3.call("/mem/image/I1/custom", {"x": "1"}) == [1, 2]
    assert network.last.full_url.endswith("/psapi/v3/mem/image/I1/custom?x=1")


def test_clients_do_not_share_sessions(network):
    first = PhotoShelterV4(api_key="k")
    second = PhotoShelterV4(api_key="k")
    first.auth.use_token("only-first")

    assert first.auth.is_authenticated
    assert not second.auth.is_authenticated
