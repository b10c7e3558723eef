"""Prompt texts for auditing, documenting and planning Tag Manager setups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence

from .templates import get_tag_templates, get_trigger_templates
from .uris import _marshal_indent, _plain


@dataclass(frozen=True)
class PromptArgument:
    """An argument a prompt takes."""

    name: str
    description: str
    required: bool = True


@dataclass(frozen=True)
class PromptDefinition:
    """A prompt offered to clients."""

    name: str
    description: str
    arguments: tuple[PromptArgument, ...]


@dataclass(frozen=True)
class PromptResult:
    """A generated prompt: a description and the message text."""

    description: str
    text: str
    role: str = "user"


_WORKSPACE_ARGUMENTS = (
    PromptArgument("accountId", "The GTM account ID"),
    PromptArgument("containerId", "The GTM container ID"),
    PromptArgument("workspaceId", "The GTM workspace ID"),
)

_PROMPTS = (
    PromptDefinition(
        name="audit_container",
        description=(
            "Review a GTM workspace for problems such as duplicates, "
            "inconsistent naming and departures from best practice"
        ),
        arguments=_WORKSPACE_ARGUMENTS,
    ),
    PromptDefinition(
        name="generate_tracking_plan",
        description=(
            "Produce a Markdown tracking plan from the tags, triggers and "
            "variables already present in a workspace"
        ),
        arguments=_WORKSPACE_ARGUMENTS,
    ),
    PromptDefinition(
        name="suggest_ga4_setup",
        description="Propose a GA4 tag layout that fits the stated tracking goals",
        arguments=(
            PromptArgument(
                "goals",
                "What should be tracked, for example 'purchases, form submits, "
                "button clicks'",
            ),
        ),
    ),
    PromptDefinition(
        name="find_gallery_template",
        description="Walk through locating and importing a Community Template Gallery template",
        arguments=(
            PromptArgument(
                "templateName",
                "Name of the template to look for, for example 'cookiebot'",
            ),
        ),
    ),
)

Section = tuple[str, Sequence[str]]

_AUDIT_SECTIONS: tuple[Section, ...] = (
    (
        "Naming Consistency",
        (
            "Do the names of tags, triggers and variables follow one pattern?",
            "Which names are vague or fail to describe their purpose?",
        ),
    ),
    (
        "Duplicate Detection",
        (
            "Which tags look like duplicates (same type, similar settings)?",
            "Which triggers fire under identical conditions?",
        ),
    ),
    (
        "Orphaned Items",
        (
            "Which triggers are attached to no tag?",
            "Which variables seem never to be referenced?",
        ),
    ),
    (
        "Best Practices",
        (
            "Is each tag paired with a sensible trigger?",
            "Are paused tags lying around and possibly forgotten?",
            "Are triggers for common needs missing?",
        ),
    ),
    (
        "GA4 Configuration (where relevant)",
        (
            "Is a GA4 configuration tag present?",
            "Are event tags tied to that configuration?",
            "Are ecommerce events set up correctly?",
        ),
    ),
    (
        "Security Concerns",
        (
            "Do any custom HTML tags carry security risk?",
            "Do any tags pull in scripts from outside sources?",
        ),
    ),
)

_GA4_SECTIONS: tuple[Section, ...] = (
    (
        "Recommended Tags",
        (
            "Every tag required, giving its name (convention: \"[Category] - [Action]\"), "
            "its type, its settings and the trigger it uses",
        ),
    ),
    (
        "Recommended Triggers",
        ("Every trigger required, giving its name, its type and any filter conditions",),
    ),
    (
        "Required Variables",
        (
            "Data Layer variables that must be created",
            "Built-in variables that must be switched on",
        ),
    ),
    (
        "Data Layer Requirements",
        (
            "The dataLayer pushes the site has to make",
            "A sample code snippet for each event",
        ),
    ),
    (
        "Implementation Order",
        ("The sequence in which to build tags, triggers and variables",),
    ),
    (
        "Testing Checklist",
        (
            "The main scenarios to verify",
            "The GA4 events and parameters each should produce",
        ),
    ),
)

_PLAN_OUTLINE = "\n".join(
    (
        "# Tracking Plan",
        "",
        "## Overview",
        "- What the implementation tracks, in brief",
        "- Counts of tags, triggers and variables",
        "",
        "## Events",
        "",
        "One section per tag:",
        "",
        "### [Event Name]",
        "- **Tag Name:** [name]",
        "- **Tag Type:** [type]",
        "- **Trigger(s):** [trigger names]",
        "- **Description:** [likely purpose]",
        "- **Parameters:** [where present]",
        "",
        "## Triggers",
        "",
        "One section per trigger:",
        "",
        "### [Trigger Name]",
        "- **Type:** [type]",
        "- **Conditions:** [filters, if any]",
        "- **Used by:** [tags that use it]",
        "",
        "## Variables",
        "",
        "One section per variable:",
        "",
        "### [Variable Name]",
        "- **Type:** [type]",
        "- **Purpose:** [likely purpose]",
        "",
        "## Data Layer Requirements",
        "",
        "Every dataLayer event and variable the site must push.",
        "",
        "## Implementation Notes",
        "",
        "Remarks on the setup, its dependencies, and suggested improvements.",
    )
)

_COMMON_GALLERY_TEMPLATES = (
    ("iubenda Cookie Solution", "iubenda", "gtm-cookie-solution"),
    ("Cookiebot", "nicktue-gtm-templates", "cookiebot-gtm"),
    ("Facebook Pixel", "nicktue-gtm-templates", "facebook-pixel"),
)


def _numbered_sections(sections: Iterable[Section]) -> str:
    blocks = []
    for number, (heading, points) in enumerate(sections, start=1):
        lines = [f"{number}. **{heading}**"]
        lines.extend(f"   - {point}" for point in points)
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def list_prompts() -> list[PromptDefinition]:
    """All prompts on offer."""
    return list(_PROMPTS)


def _sorted_map(data: Mapping[str, Any]) -> dict[str, Any]:
    return dict(sorted(data.items()))


def audit_container_prompt(
    tags: Iterable[Any], triggers: Iterable[Any], variables: Iterable[Any]
) -> PromptResult:
    """Ask for an audit of a workspace's tags, triggers and variables."""
    tags, triggers, variables = list(tags), list(triggers), list(variables)
    data = _sorted_map(
        {
            "tags": tags,
            "triggers": triggers,
            "variables": variables,
            "summary": _sorted_map(
                {
                    "totalTags": len(tags),
                    "totalTriggers": len(triggers),
                    "totalVariables": len(variables),
                }
            ),
        }
    )
    text = (
        "Audit the GTM workspace below and point out any problems. "
        "Its current configuration:\n\n"
        f"{_marshal_indent(data)}\n\n"
        "Cover each of these areas:\n\n"
        f"{_numbered_sections(_AUDIT_SECTIONS)}\n\n"
        "Finish with concrete recommendations for improvement."
    )
    return PromptResult(description="Container audit analysis request", text=text)


def tracking_plan_prompt(
    tags: Iterable[Any], triggers: Iterable[Any], variables: Iterable[Any]
) -> PromptResult:
    """Ask for a Markdown tracking plan of a workspace."""
    tags = list(tags)
    plain_triggers = [_plain(t) for t in triggers]
    variables = list(variables)
    trigger_map = {t.get("triggerId", ""): t.get("name", "") for t in plain_triggers}
    data = _sorted_map(
        {
            "tags": tags,
            "triggers": plain_triggers,
            "variables": variables,
            "triggerMap": _sorted_map(trigger_map),
        }
    )
    text = (
        "Write a thorough Markdown tracking plan for the GTM workspace "
        "configured as follows:\n\n"
        f"{_marshal_indent(data)}\n\n"
        "Lay the document out like this:\n\n"
        f"{_PLAN_OUTLINE}\n\n"
        "Keep the Markdown tidy and professional."
    )
    return PromptResult(description="Generate tracking plan documentation", text=text)


def suggest_ga4_setup_prompt(goals: str) -> PromptResult:
    """Ask for a GA4 setup that serves the given tracking goals."""
    if not goals:
        raise ValueError("goals description is required")
    data = _sorted_map(
        {
            "tagTemplates": get_tag_templates(),
            "triggerTemplates": get_trigger_templates(),
        }
    )
    text = (
        "Help me configure GA4 tracking in Google Tag Manager for these goals.\n\n"
        "**Tracking Goals:**\n"
        f"{goals}\n\n"
        "These tag and trigger templates are available:\n\n"
        f"{_marshal_indent(data)}\n\n"
        "Please supply:\n\n"
        f"{_numbered_sections(_GA4_SECTIONS)}\n\n"
        "Be precise about the GTM settings and follow the parameter formats "
        "used in the templates exactly."
    )
    return PromptResult(description="GA4 setup recommendations", text=text)


def find_gallery_template_prompt(template_name: str) -> PromptResult:
    """Guide the search for a Community Template Gallery template by name."""
    if not template_name:
        raise ValueError("templateName is required")
    table_rows = "\n".join(
        f"| {label} | {owner} | {repository} |"
        for label, owner, repository in _COMMON_GALLERY_TEMPLATES
    )
    text = (
        f'Locate the "{template_name}" template in the GTM Community Template '
        "Gallery and import it.\n\n"
        "**Steps to locate a Community Template:**\n\n"
        f'1. **Run a web search** for "{template_name} GTM community template github"\n'
        "   - Gallery templates live in GitHub repositories\n"
        "   - Prefer hits on github.com\n\n"
        "2. **Read the owner and repository** from the GitHub address:\n"
        "   - The address has the shape github.com/{owner}/{repository}\n"
        "   - For the iubenda cookie solution repository, for instance:\n"
        '     - galleryOwner: "iubenda"\n'
        '     - galleryRepository: "gtm-cookie-solution"\n\n'
        "3. **Look through the Gallery itself** (optional):\n"
        f"   - Open the Tag Manager Community Template Gallery and filter by: {template_name}\n"
        "   - Open the template to read its details\n\n"
        "**Well-known templates:**\n\n"
        "| Template | galleryOwner | galleryRepository |\n"
        "|----------|--------------|-------------------|\n"
        f"{table_rows}\n\n"
        "**With the owner and repository in hand:**\n\n"
        "Call the import_gallery_template tool with:\n"
        "- galleryOwner: [owner on GitHub]\n"
        "- galleryRepository: [repository on GitHub]\n\n"
        "It answers with the template type (cvt_{containerId}_{templateId}) "
        "to give when creating tags.\n\n"
        f'Search for the "{template_name}" template and report its galleryOwner '
        "and galleryRepository."
    )
    return PromptResult(
        description="Find and import a Community Template Gallery template",
        text=text,
    )