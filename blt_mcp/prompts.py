"""Prompt rendering for BLT security workflows.

Available prompts:
- triage_vulnerability: Guide AI through vulnerability assessment
- plan_remediation: Create remediation plans for security issues
- review_contribution: Evaluate security contributions
"""

import json
import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from mcp import types

from blt_mcp import catalog
from blt_mcp.client import BLTClient
from blt_mcp.errors import BLTError, ProtocolError, ValidationError, format_error
from blt_mcp.validation import optional_string, require_string, validate_identifier

logger = logging.getLogger(__name__)

PromptHandler = Callable[[Mapping[str, Any]], Awaitable[str]]

UNSPECIFIED_COMPONENT = "unspecified component"
DEFAULT_CONTRIBUTION_TYPE = "contribution"

TRIAGE_TEMPLATE = """\
You are a security expert helping to triage a vulnerability report. \
Please analyze the following vulnerability and provide:

1. Severity Assessment (Critical/High/Medium/Low)
2. Potential Impact Analysis
3. Affected Systems/Components
4. Immediate Mitigation Recommendations
5. Suggested Priority Level

Vulnerability Description:
{description}

Affected Component: {component}

Please provide a structured analysis with clear, actionable recommendations."""

REMEDIATION_TEMPLATE = """\
You are a security expert creating a remediation plan for issue #{issue_id}. \
Please provide:

1. Root Cause Analysis
2. Step-by-Step Remediation Plan
3. Testing and Verification Steps
4. Prevention Measures for Future
5. Estimated Timeline and Resources

{issue_details}
{context}
Please create a comprehensive, actionable remediation plan that can be \
followed by the development team."""

REVIEW_TEMPLATE = """\
You are reviewing a security contribution (ID: {contribution_id}, Type: {contribution_type}). \
Please evaluate:

1. Quality and Accuracy of the {contribution_type}
2. Completeness of Information
3. Technical Depth and Insight
4. Value to the Security Community
5. Recommended Bacon Points (1-100 scale)

Please provide a thorough review with:
- Strengths of the contribution
- Areas for improvement (if any)
- Recommended bacon point award with justification
- Any follow-up actions needed

Be constructive and encouraging while maintaining high standards for security contributions."""


def _optional_text(args: Mapping[str, Any], field: str) -> str | None:
    # clients often send empty strings for optional prompt arguments
    value = args.get(field)
    if isinstance(value, str) and not value.strip():
        return None
    return optional_string(args, field)


def _user_message(text: str) -> types.PromptMessage:
    return types.PromptMessage(role="user", content=types.TextContent(type="text", text=text))


class PromptRenderer:
    """Renders BLT prompt templates, enriching them with API data when useful."""

    def __init__(self, client: BLTClient) -> None:
        self.client = client
        self._renderers: dict[str, PromptHandler] = {
            "triage_vulnerability": self._triage_vulnerability,
            "plan_remediation": self._plan_remediation,
            "review_contribution": self._review_contribution,
        }

    def list_prompts(self) -> list[types.Prompt]:
        return catalog.list_prompts()

    async def get_prompt(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
    ) -> types.GetPromptResult:
        """Render a prompt.

        Args:
            name: Prompt name
            arguments: Prompt arguments (all strings on the wire)

        Returns:
            One user-role message with the rendered template

        Raises:
            ProtocolError: If the prompt name is unknown
            ValidationError: If a required argument is missing or invalid
        """
        renderer = self._renderers.get(name)
        if renderer is None:
            msg = f"Unknown prompt: {name}"
            raise ProtocolError(msg, {"prompt": name})

        logger.info("Rendering prompt %s", name, extra={"prompt": name})
        text = await renderer(arguments or {})
        spec = next(p for p in catalog.PROMPTS if p.name == name)
        return types.GetPromptResult(description=spec.description, messages=[_user_message(text)])

    async def _triage_vulnerability(self, args: Mapping[str, Any]) -> str:
        try:
            description = require_string(args, "vulnerability_description")
        except ValidationError as e:
            msg = "vulnerability_description is required: describe the reported vulnerability"
            raise ValidationError(msg, field="vulnerability_description") from e
        component = _optional_text(args, "affected_component") or UNSPECIFIED_COMPONENT
        return TRIAGE_TEMPLATE.format(description=description, component=component)

    async def _plan_remediation(self, args: Mapping[str, Any]) -> str:
        issue_id = validate_identifier(require_string(args, "issue_id"), "issue_id")
        context = _optional_text(args, "context")

        try:
            issue = await self.client.request(f"/issues/{issue_id}")
        except BLTError as e:
            logger.warning(
                "Could not fetch issue %s for remediation prompt: %s",
                issue_id,
                e.message,
                extra={"prompt": "plan_remediation", "error_type": e.code.value},
            )
            issue_details = (
                f"Note: could not fetch details for issue #{issue_id} ({format_error(e)}).\n"
            )
        else:
            issue_details = f"Issue Details:\n{json.dumps(issue, indent=2)}\n"

        context_block = f"Additional Context:\n{context}\n" if context else ""
        return REMEDIATION_TEMPLATE.format(
            issue_id=issue_id,
            issue_details=issue_details,
            context=context_block,
        )

    async def _review_contribution(self, args: Mapping[str, Any]) -> str:
        contribution_id = require_string(args, "contribution_id")
        contribution_type = (
            _optional_text(args, "contribution_type") or DEFAULT_CONTRIBUTION_TYPE
        )
        return REVIEW_TEMPLATE.format(
            contribution_id=contribution_id,
            contribution_type=contribution_type,
        )


__all__ = ["PromptRenderer"]
