"""Tool dispatch: named BLT actions to validated API calls.

Tool execution flow:
1. Ensure arguments are a mapping
2. Route on the tool name
3. Validate arguments (no defaults for severity or type)
4. Make the authenticated API call
5. Return the JSON result, or labelled error content

``ToolDispatcher.call_tool`` never raises: every failure becomes a
``CallToolResult`` with ``isError=True``.
"""

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from mcp import types

from blt_mcp import catalog
from blt_mcp.client import BLTClient
from blt_mcp.errors import BLTError, format_error
from blt_mcp.validation import (
    ISSUE_STATUSES,
    ISSUE_TYPES,
    SEVERITIES,
    optional_string,
    require_enum,
    require_positive_number,
    require_string,
    validate_identifier,
)

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Mapping[str, Any]], Awaitable[Any]]


def _text_result(text: str, is_error: bool = False) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=text)],
        isError=is_error,
    )


class ToolDispatcher:
    """Executes BLT tools against the API."""

    def __init__(self, client: BLTClient) -> None:
        self.client = client
        self._handlers: dict[str, ToolHandler] = {
            "submit_issue": self._submit_issue,
            "award_bacon": self._award_bacon,
            "update_issue_status": self._update_issue_status,
            "add_comment": self._add_comment,
        }

    def list_tools(self) -> list[types.Tool]:
        return catalog.list_tools()

    async def call_tool(self, name: str, arguments: Any) -> types.CallToolResult:
        """Run a tool and wrap its outcome as MCP content.

        Args:
            name: Tool name
            arguments: Raw, untrusted tool arguments

        Returns:
            Result content; ``isError`` is set for every failure
        """
        if not isinstance(arguments, Mapping):
            return _text_result("Error: Missing required arguments", is_error=True)

        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("Unknown tool requested: %s", name, extra={"tool": name})
            return _text_result(f"Error: Unknown tool: {name}", is_error=True)

        logger.info("Tool call: %s", name, extra={"tool": name})
        try:
            result = await handler(arguments)
        except BLTError as e:
            logger.warning(
                "Tool '%s' failed: %s",
                name,
                e.message,
                extra={"tool": name, "error_type": e.code.value},
            )
            return _text_result(format_error(e), is_error=True)
        except Exception as e:
            logger.exception("Unexpected error in tool '%s'", name, extra={"tool": name})
            return _text_result(format_error(e), is_error=True)

        return _text_result(json.dumps(result, indent=2))

    async def _submit_issue(self, args: Mapping[str, Any]) -> Any:
        body: dict[str, Any] = {
            "title": require_string(args, "title"),
            "description": require_string(args, "description"),
            "severity": require_enum(require_string(args, "severity"), SEVERITIES, "severity"),
            "type": require_enum(require_string(args, "type"), ISSUE_TYPES, "type"),
        }
        repo_id = optional_string(args, "repo_id")
        if repo_id is not None:
            body["repo_id"] = validate_identifier(repo_id, "repo_id")
        return await self.client.request("/issues", "POST", body)

    async def _award_bacon(self, args: Mapping[str, Any]) -> Any:
        contributor_id = validate_identifier(
            require_string(args, "contributor_id"), "contributor_id"
        )
        body = {
            "points": require_positive_number(args, "points"),
            "reason": require_string(args, "reason"),
        }
        return await self.client.request(f"/contributors/{contributor_id}/rewards", "POST", body)

    async def _update_issue_status(self, args: Mapping[str, Any]) -> Any:
        issue_id = validate_identifier(require_string(args, "issue_id"), "issue_id")
        body: dict[str, Any] = {
            "status": require_enum(require_string(args, "status"), ISSUE_STATUSES, "status"),
        }
        comment = optional_string(args, "comment")
        if comment is not None:
            body["comment"] = comment
        return await self.client.request(f"/issues/{issue_id}", "PATCH", body)

    async def _add_comment(self, args: Mapping[str, Any]) -> Any:
        issue_id = validate_identifier(require_string(args, "issue_id"), "issue_id")
        body = {"comment": require_string(args, "comment")}
        return await self.client.request(f"/issues/{issue_id}/comments", "POST", body)


__all__ = ["ToolDispatcher"]
