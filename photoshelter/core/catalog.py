"""
Endpoint catalogue for the PhotoShelter v3 and v4 APIs.

Each row maps one remote operation to its HTTP method, path template and
documented parameters. Operation groups on the SDK clients are generated
from these tables.
"""

from photoshelter.core.types import Endpoint, Param

PAGING = (Param("page"), Param("per_page"))
SEARCH = (Param("query", required=True), *PAGING)


def _named(*fields: str, required: bool = False) -> tuple[Param, ...]:
    return tuple(Param(name, required=required) for name in fields)


def _resource(
    group: str,
    path: str,
    noun: str,
    create: tuple[Param, ...] = (),
    ops: tuple[str, ...] = ("get_all", "get_by_id", "create", "update", "delete"),
) -> tuple[Endpoint, ...]:
    """
    Build the usual CRUD rows for a collection resource.

    ``create`` lists the create parameters; update takes the same names, all
    optional.
    """
    update = tuple(Param(p.name) for p in create)
    rows = {
        "get_all": Endpoint(group, "get_all", "GET", path, PAGING, f"List {noun}s"),
        "get_by_id": Endpoint(group, "get_by_id", "GET", f"{path}/{{id}}", (), f"Get a {noun} by ID"),
        "search": Endpoint(group, "search", "GET", f"{path}/search", SEARCH, f"Search {noun}s"),
        "create": Endpoint(group, "create", "POST", path, create, f"Create a {noun}"),
        "update": Endpoint(group, "update", "PUT", f"{path}/{{id}}", update, f"Update a {noun}"),
        "delete": Endpoint(group, "delete", "DELETE", f"{path}/{{id}}", (), f"Delete a {noun}"),
    }
    return tuple(rows[op] for op in ops)


NAME_DESCRIPTION = _named("name", "description", required=True)
NAME_OPTIONAL_DESCRIPTION = (Param("name", required=True), Param("description"))
USER_FIELDS = (Param("name", required=True), Param("email", required=True), Param("password"))
READ_SEARCH = ("get_all", "get_by_id", "search")


# =============================================================================
# v4
# =============================================================================


V4_ENDPOINTS: tuple[Endpoint, ...] = (
    *_resource("collections", "/collections", "collection", ops=READ_SEARCH),
    *_resource(
        "contacts",
        "/contacts",
        "contact",
        create=(Param("name", required=True), Param("email", required=True), Param("phone")),
    ),
    *_resource(
        "embed_tokens",
        "/embedtokens",
        "embed token",
        create=NAME_DESCRIPTION,
        ops=("get_all", "get_by_id", "create", "delete"),
    ),
    *_resource("faces", "/faces", "face", create=NAME_OPTIONAL_DESCRIPTION),
    *_resource("galleries", "/galleries", "gallery", ops=READ_SEARCH),
    *_resource("integrations", "/integrations", "integration", create=NAME_DESCRIPTION),
    *_resource("library", "/library", "library item", ops=READ_SEARCH),
    *_resource("media", "/media", "media item", create=NAME_DESCRIPTION),
    *_resource("media_versions", "/media-versions", "media version", create=NAME_DESCRIPTION),
    *_resource("ml_metadata", "/ml-metadata", "machine learning metadata record", create=NAME_DESCRIPTION),
    *_resource("metadata", "/metadata", "metadata record", create=NAME_DESCRIPTION),
    Endpoint(
        "oauth",
        "authorize",
        "GET",
        "/oauth/authorize",
        _named("client_id", "redirect_uri", "response_type", "scope", required=True),
        "Authorize an OAuth client",
    ),
    Endpoint(
        "oauth",
        "token",
        "GET",
        "/oauth/token",
        _named("client_id", "client_secret", "code", "redirect_uri", "grant_type", required=True),
        "Exchange an OAuth authorization code for a token",
    ),
    *_resource("organization", "/organization", "organization", create=NAME_DESCRIPTION),
    *_resource("people", "/people", "person", create=NAME_OPTIONAL_DESCRIPTION),
    *_resource("portal", "/portal", "portal item", create=NAME_DESCRIPTION),
    *_resource("permissions", "/permissions", "permission", create=NAME_DESCRIPTION),
    *_resource("resource_tickets", "/resource-tickets", "resource ticket", create=NAME_DESCRIPTION),
    Endpoint("search", "search_all", "GET", "/search", SEARCH, "Search all items"),
    Endpoint("settings", "get_all", "GET", "/settings", (), "Get all settings"),
    Endpoint("settings", "update", "PUT", "/settings", (), "Update settings"),
    *_resource("squirrel", "/squirrel", "squirrel item", create=NAME_DESCRIPTION),
    *_resource("trash", "/trash", "trashed item", ops=("get_all", "get_by_id")),
    Endpoint("trash", "restore", "POST", "/trash/{id}/restore", (), "Restore an item from the trash"),
    Endpoint("trash", "delete", "DELETE", "/trash/{id}", (), "Permanently delete a trashed item"),
    Endpoint("two_factor", "enable", "POST", "/twofactor/enable", (), "Enable two-factor authentication"),
    Endpoint("two_factor", "disable", "POST", "/twofactor/disable", (), "Disable two-factor authentication"),
    Endpoint(
        "two_factor",
        "verify",
        "POST",
        "/twofactor/verify",
        (Param("code", required=True),),
        "Verify a two-factor code",
    ),
    *_resource("user", "/user", "user", create=USER_FIELDS),
    *_resource("users", "/users", "user", create=USER_FIELDS),
    Endpoint("version", "get_all", "GET", "/version", (), "Get API version information"),
    *_resource("workspaces", "/workspaces", "workspace", create=NAME_DESCRIPTION),
)


# =============================================================================
# v3
# =============================================================================

# Member endpoints live under /mem and need a logged-in session; the public
# ones describe what an organization publishes.

V3_ENDPOINTS: tuple[Endpoint, ...] = (
    Endpoint("session", "get", "GET", "/mem/user/session", (), "Get the current session"),
    Endpoint(
        "session",
        "authenticate_organization",
        "POST",
        "/mem/organization/{org_id}/authenticate",
        (),
        "Switch the session into an organization",
    ),
    Endpoint("session", "unauthenticate_organization", "DELETE", "/mem/organization/authenticate", ()),
    Endpoint("organization", "get_all", "GET", "/mem/organization", PAGING, "List the user's organizations"),
    Endpoint("organization", "get_by_id", "GET", "/mem/organization/{org_id}", ()),
    Endpoint("organization", "users", "GET", "/mem/organization/{org_id}/users", PAGING),
    Endpoint("collections", "root_children", "GET", "/mem/collection/root/children", PAGING),
    Endpoint("collections", "get_by_id", "GET", "/mem/collection/{collection_id}", (), "Get a collection by ID"),
    Endpoint("collections", "children", "GET", "/mem/collection/{collection_id}/children", PAGING),
    Endpoint(
        "collections",
        "create",
        "POST",
        "/mem/collection",
        (Param("name", required=True), Param("mode"), Param("parent_id"), Param("description")),
        "Create a collection",
    ),
    Endpoint(
        "collections",
        "update",
        "PUT",
        "/mem/collection/{collection_id}",
        _named("name", "mode", "description"),
    ),
    Endpoint("collections", "delete", "DELETE", "/mem/collection/{collection_id}", ()),
    Endpoint("galleries", "get_by_id", "GET", "/mem/gallery/{gallery_id}", (), "Get a gallery by ID"),
    Endpoint("galleries", "images", "GET", "/mem/gallery/{gallery_id}/images", PAGING),
    Endpoint(
        "galleries",
        "create",
        "POST",
        "/mem/gallery",
        (Param("name", required=True), Param("mode"), Param("parent_id"), Param("description")),
        "Create a gallery",
    ),
    Endpoint(
        "galleries",
        "update",
        "PUT",
        "/mem/gallery/{gallery_id}",
        _named("name", "mode", "description"),
    ),
    Endpoint("galleries", "delete", "DELETE", "/mem/gallery/{gallery_id}", ()),
    Endpoint(
        "galleries",
        "add_image",
        "POST",
        "/mem/gallery/{gallery_id}/image-link",
        (Param("image_id", required=True),),
        "Link an image into a gallery",
    ),
    Endpoint("galleries", "remove_image", "DELETE", "/mem/gallery/{gallery_id}/image-link/{image_id}", ()),
    Endpoint("images", "get_by_id", "GET", "/mem/image/{image_id}", (), "Get an image by ID"),
    Endpoint("images", "iptc", "GET", "/mem/image/{image_id}/iptc", ()),
    Endpoint(
        "images",
        "update_iptc",
        "PUT",
        "/mem/image/{image_id}/iptc",
        _named("caption", "keywords", "credit", "copyright"),
    ),
    Endpoint("images", "links", "GET", "/mem/image/{image_id}/links", ()),
    Endpoint(
        "images",
        "download",
        "GET",
        "/mem/image/{image_id}/download",
        (Param("download_type"),),
        "Download the original file (returns raw bytes)",
    ),
    Endpoint("images", "delete", "DELETE", "/mem/image/{image_id}", ()),
    Endpoint("search", "images", "GET", "/mem/image/search", (Param("terms", required=True), *PAGING)),
    Endpoint("users", "get", "GET", "/mem/user", (), "Get the logged-in user"),
    Endpoint("users", "update", "PUT", "/mem/user", _named("first_name", "last_name", "email")),
    Endpoint("public", "organization", "GET", "/organization/{org_id}", ()),
    Endpoint("public", "collection", "GET", "/collection/{collection_id}", ()),
    Endpoint("public", "collection_children", "GET", "/collection/{collection_id}/children", PAGING),
    Endpoint("public", "gallery", "GET", "/gallery/{gallery_id}", ()),
    Endpoint("public", "gallery_images", "GET", "/gallery/{gallery_id}/images", PAGING),
    Endpoint("public", "image", "GET", "/image/{image_id}", ()),
    Endpoint("public", "search", "GET", "/image/search", (Param("terms", required=True), *PAGING)),
)


def groups(endpoints: tuple[Endpoint, ...]) -> dict[str, tuple[Endpoint, ...]]:
    """Group catalogue rows by operation group, preserving table order."""
    grouped: dict[str, list[Endpoint]] = {}
    for endpoint in endpoints:
        grouped.setdefault(endpoint.group, []).append(endpoint)
    return {name: tuple(rows) for name, rows in grouped.items()}
