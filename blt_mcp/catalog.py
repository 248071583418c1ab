"""Static catalogs of the resources, tools and prompts the server exposes.

The definitions are immutable module-level tuples. The ``list_*`` helpers
build fresh MCP protocol objects on every call, so callers can never mutate
the catalog through a returned value.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from mcp import types

from blt_mcp.validation import ISSUE_STATUSES, ISSUE_TYPES, SEVERITIES

URI_SCHEME = "blt"
JSON_MIME_TYPE = "application/json"

_IDENTIFIER_PATTERN = "^[A-Za-z0-9_-]+$"


# ============================================================================
# Catalog entry definitions
# ============================================================================


@dataclass(frozen=True)
class ResourceSpec:
    """A directly dereferenceable resource URI."""

    uri: str
    name: str
    description: str
    mime_type: str = JSON_MIME_TYPE

    def to_mcp(self) -> types.Resource:
        return types.Resource(
            uri=self.uri,
            name=self.name,
            description=self.description,
            mimeType=self.mime_type,
        )


@dataclass(frozen=True)
class ResourceTemplateSpec:
    """A parameterized resource URI, published separately from resources."""

    uri_template: str
    name: str
    description: str
    mime_type: str = JSON_MIME_TYPE

    def to_mcp(self) -> types.ResourceTemplate:
        return types.ResourceTemplate(
            uriTemplate=self.uri_template,
            name=self.name,
            description=self.description,
            mimeType=self.mime_type,
        )


@dataclass(frozen=True)
class ToolSpec:
    """A tool with its JSON-schema input contract."""

    name: str
    description: str
    input_schema: Mapping[str, Any]

    def to_mcp(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=_thaw(self.input_schema),
        )


@dataclass(frozen=True)
class PromptArgumentSpec:
    name: str
    description: str
    required: bool = False


@dataclass(frozen=True)
class PromptSpec:
    """A prompt template with its argument contract."""

    name: str
    description: str
    arguments: tuple[PromptArgumentSpec, ...]

    def to_mcp(self) -> types.Prompt:
        return types.Prompt(
            name=self.name,
            description=self.description,
            arguments=[
                types.PromptArgument(name=a.name, description=a.description, required=a.required)
                for a in self.arguments
            ],
        )


def _freeze(value: Any) -> Any:
    """Recursively turn dicts into read-only mappings and lists into tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: _freeze(v) for k, v in value.items()})
    if isinstance(value, list | tuple):
        return tuple(_freeze(v) for v in value)
    return value


def _thaw(value: Any) -> Any:
    """Inverse of ``_freeze``; returns a fresh, independent copy."""
    if isinstance(value, Mapping):
        return {k: _thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [_thaw(v) for v in value]
    return value


# ============================================================================
# Resources
# ============================================================================

RESOURCES: tuple[ResourceSpec, ...] = (
    ResourceSpec("blt://issues", "BLT Issues", "List all issues in the BLT system"),
    ResourceSpec("blt://repos", "BLT Repositories", "List all repositories tracked in BLT"),
    ResourceSpec(
        "blt://contributors", "BLT Contributors", "List all contributors in the BLT system"
    ),
    ResourceSpec("blt://workflows", "BLT Workflows", "List all workflows in the BLT system"),
    ResourceSpec(
        "blt://leaderboards", "BLT Leaderboards", "View leaderboard rankings and statistics"
    ),
    ResourceSpec("blt://rewards", "BLT Rewards", "List all rewards and bacon points"),
)

RESOURCE_TEMPLATES: tuple[ResourceTemplateSpec, ...] = (
    ResourceTemplateSpec(
        "blt://issues/{id}", "BLT Issue by ID", "Get details for a specific issue by ID"
    ),
    ResourceTemplateSpec(
        "blt://repos/{id}", "BLT Repository by ID", "Get details for a specific repository by ID"
    ),
    ResourceTemplateSpec(
        "blt://contributors/{id}",
        "BLT Contributor by ID",
        "Get details for a specific contributor by ID",
    ),
    ResourceTemplateSpec(
        "blt://workflows/{id}", "BLT Workflow by ID", "Get details for a specific workflow by ID"
    ),
)


# ============================================================================
# Tools
# ============================================================================

TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec(
        name="submit_issue",
        description=(
            "Submit a new issue to the BLT system. Use this to report bugs, "
            "vulnerabilities, or other issues."
        ),
        input_schema=_freeze(
            {
                "type": "object",
                "properties": {
                    "title": {"type": "string", "description": "The title of the issue"},
                    "description": {
                        "type": "string",
                        "description": "Detailed description of the issue",
                    },
                    "repo_id": {
                        "type": "string",
                        "pattern": _IDENTIFIER_PATTERN,
                        "description": "The repository ID where the issue was found",
                    },
                    "severity": {
                        "type": "string",
                        "enum": list(SEVERITIES),
                        "description": "The severity level of the issue",
                    },
                    "type": {
                        "type": "string",
                        "enum": list(ISSUE_TYPES),
                        "description": "The type of issue",
                    },
                },
                "required": ["title", "description", "severity", "type"],
            }
        ),
    ),
    ToolSpec(
        name="award_bacon",
        description=(
            "Award bacon points to a contributor for their contribution. "
            "This is part of BLT's gamification system."
        ),
        input_schema=_freeze(
            {
                "type": "object",
                "properties": {
                    "contributor_id": {
                        "type": "string",
                        "pattern": _IDENTIFIER_PATTERN,
                        "description": "The ID of the contributor to award",
                    },
                    "points": {
                        "type": "number",
                        "exclusiveMinimum": 0,
                        "description": "The number of bacon points to award",
                    },
                    "reason": {
                        "type": "string",
                        "description": "The reason for awarding the bacon points",
                    },
                },
                "required": ["contributor_id", "points", "reason"],
            }
        ),
    ),
    ToolSpec(
        name="update_issue_status",
        description="Update the status of an existing issue in the BLT system.",
        input_schema=_freeze(
            {
                "type": "object",
                "properties": {
                    "issue_id": {
                        "type": "string",
                        "pattern": _IDENTIFIER_PATTERN,
                        "description": "The ID of the issue to update",
                    },
                    "status": {
                        "type": "string",
                        "enum": list(ISSUE_STATUSES),
                        "description": "The new status for the issue",
                    },
                    "comment": {
                        "type": "string",
                        "description": "Optional comment explaining the status change",
                    },
                },
                "required": ["issue_id", "status"],
            }
        ),
    ),
    ToolSpec(
        name="add_comment",
        description="Add a comment to an existing issue in the BLT system.",
        input_schema=_freeze(
            {
                "type": "object",
                "properties": {
                    "issue_id": {
                        "type": "string",
                        "pattern": _IDENTIFIER_PATTERN,
                        "description": "The ID of the issue to comment on",
                    },
                    "comment": {"type": "string", "description": "The comment text to add"},
                },
                "required": ["issue_id", "comment"],
            }
        ),
    ),
)


# ============================================================================
# Prompts
# ============================================================================

PROMPTS: tuple[PromptSpec, ...] = (
    PromptSpec(
        name="triage_vulnerability",
        description=(
            "Guides the AI through triaging a vulnerability report, including "
            "severity assessment and initial recommendations."
        ),
        arguments=(
            PromptArgumentSpec(
                "vulnerability_description", "Description of the reported vulnerability", True
            ),
            PromptArgumentSpec(
                "affected_component", "The component or system affected by the vulnerability"
            ),
        ),
    ),
    PromptSpec(
        name="plan_remediation",
        description="Helps plan remediation steps for a confirmed security issue.",
        arguments=(
            PromptArgumentSpec(
                "issue_id", "The ID of the issue to create a remediation plan for", True
            ),
            PromptArgumentSpec("context", "Additional context about the issue"),
        ),
    ),
    PromptSpec(
        name="review_contribution",
        description=(
            "Guides the review of a security contribution, including quality "
            "assessment and bacon point recommendations."
        ),
        arguments=(
            PromptArgumentSpec("contribution_id", "The ID of the contribution to review", True),
            PromptArgumentSpec(
                "contribution_type",
                "The type of contribution (e.g., bug report, fix, documentation)",
            ),
        ),
    ),
)


def list_resources() -> list[types.Resource]:
    return [spec.to_mcp() for spec in RESOURCES]


def list_resource_templates() -> list[types.ResourceTemplate]:
    return [spec.to_mcp() for spec in RESOURCE_TEMPLATES]


def list_tools() -> list[types.Tool]:
    return [spec.to_mcp() for spec in TOOLS]


def list_prompts() -> list[types.Prompt]:
    return [spec.to_mcp() for spec in PROMPTS]


__all__ = [
    "JSON_MIME_TYPE",
    "PROMPTS",
    "RESOURCES",
    "RESOURCE_TEMPLATES",
    "TOOLS",
    "URI_SCHEME",
    "PromptArgumentSpec",
    "PromptSpec",
    "ResourceSpec",
    "ResourceTemplateSpec",
    "ToolSpec",
    "list_prompts",
    "list_resource_templates",
    "list_resources",
    "list_tools",
]
