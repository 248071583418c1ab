"""Resource routing: ``blt://`` URIs to BLT API calls.

Supported URI patterns:
- blt://issues, blt://issues/{id}
- blt://repos, blt://repos/{id}
- blt://contributors, blt://contributors/{id}
- blt://workflows, blt://workflows/{id}
- blt://leaderboards
- blt://rewards
"""

import json
import logging
import re

from mcp import types

from blt_mcp import catalog
from blt_mcp.client import BLTClient
from blt_mcp.errors import BLTError, ProtocolError, ResourceReadError
from blt_mcp.validation import validate_identifier

logger = logging.getLogger(__name__)

_URI_RE = re.compile(r"^blt://([^/]+)(?:/(.*))?$", re.DOTALL)

# resource type -> collection endpoint; these accept an optional identifier
ENTITY_ENDPOINTS: dict[str, str] = {
    "issues": "/issues",
    "repos": "/repos",
    "contributors": "/contributors",
    "workflows": "/workflows",
}

# collection-only resource types
COLLECTION_ENDPOINTS: dict[str, str] = {
    "leaderboards": "/leaderboards",
    "rewards": "/rewards",
}


def resolve_endpoint(uri: str) -> str:
    """Map a resource URI to the API endpoint path it reads.

    An empty trailing segment (``blt://issues/``) routes to the collection.

    Raises:
        ProtocolError: If the URI is malformed or names an unknown resource type
        ValidationError: If the identifier segment is not a safe identifier
    """
    match = _URI_RE.match(uri)
    if not match:
        msg = f"Invalid BLT URI: {uri}"
        raise ProtocolError(msg, {"uri": uri})

    resource_type, resource_id = match.groups()

    if resource_type in COLLECTION_ENDPOINTS:
        if resource_id:
            msg = f"Resource type '{resource_type}' does not accept an identifier: {uri}"
            raise ProtocolError(msg, {"uri": uri})
        return COLLECTION_ENDPOINTS[resource_type]

    if resource_type not in ENTITY_ENDPOINTS:
        msg = f"Unknown resource type: {resource_type}"
        raise ProtocolError(msg, {"uri": uri})

    endpoint = ENTITY_ENDPOINTS[resource_type]
    if resource_id:
        return f"{endpoint}/{validate_identifier(resource_id, f'{resource_type} id')}"
    return endpoint


class ResourceRouter:
    """Reads BLT data for resource URIs."""

    def __init__(self, client: BLTClient) -> None:
        self.client = client

    def list_resources(self) -> list[types.Resource]:
        """Concrete, directly dereferenceable resources only."""
        return catalog.list_resources()

    def list_resource_templates(self) -> list[types.ResourceTemplate]:
        return catalog.list_resource_templates()

    async def read_resource(self, uri: str) -> types.TextResourceContents:
        """Read a resource and return its JSON text content.

        Args:
            uri: Resource URI as sent by the client

        Returns:
            Text content tagged with the original URI

        Raises:
            ProtocolError: If the URI cannot be routed
            ValidationError: If the URI carries an unsafe identifier
            ResourceReadError: If the API call fails
        """
        endpoint = resolve_endpoint(uri)
        logger.info("Reading resource %s", uri, extra={"resource_uri": uri})

        try:
            data = await self.client.request(endpoint)
        except BLTError as e:
            logger.warning(
                "Failed to read resource %s: %s",
                uri,
                e.message,
                extra={"resource_uri": uri, "error_type": e.code.value},
            )
            raise ResourceReadError(uri, e) from e

        return types.TextResourceContents(
            uri=uri,
            mimeType=catalog.JSON_MIME_TYPE,
            text=json.dumps(data, indent=2),
        )


__all__ = ["COLLECTION_ENDPOINTS", "ENTITY_ENDPOINTS", "ResourceRouter", "resolve_endpoint"]
