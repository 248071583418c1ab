"""BLT MCP server.

Exposes the OWASP BLT (Bug Logging Tool) API to AI agents over the Model
Context Protocol:

- Resources: read-only ``blt://`` views of issues, repositories,
  contributors, workflows, leaderboards and rewards
- Tools: submit issues, award bacon points, update issue status, comment
- Prompts: vulnerability triage, remediation planning, contribution review
"""

from blt_mcp.client import BLTClient
from blt_mcp.config import ServerConfig, load_config
from blt_mcp.errors import (
    BLTError,
    HttpError,
    NetworkError,
    ProtocolError,
    RequestTimeoutError,
    ResourceReadError,
    ValidationError,
)
from blt_mcp.server import BLTMCPServer

__version__ = "1.0.0"

__all__ = [
    "BLTClient",
    "BLTError",
    "BLTMCPServer",
    "HttpError",
    "NetworkError",
    "ProtocolError",
    "RequestTimeoutError",
    "ResourceReadError",
    "ServerConfig",
    "ValidationError",
    "__version__",
    "load_config",
]
