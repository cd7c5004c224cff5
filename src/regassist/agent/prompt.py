"""
agent.prompt - System prompt for the regulations agent.

Built from the registry so the routing rules only mention operations
that are actually registered.
"""

from __future__ import annotations

from regassist.agent.tools.registry import ToolRegistry

SITE_URL = "https://www.regulations.gov"


def build_system_prompt(registry: ToolRegistry) -> str:
    """Build the system prompt with dynamically listed operations.

    Args:
        registry: The tool registry with all registered operations.

    Returns:
        The system prompt string.
    """
    tool_names = registry.names()
    tool_lines = "\n".join(
        f"- {tool.name.value}: {tool.description}" for tool in registry.all()
    )

    document_id_rule = (
        '\nIf the user asks about a specific document ID like "FDA-2009-N-0501-0012", '
        "call get_document directly."
    ) if "get_document" in tool_names else ""

    docket_id_rule = (
        '\nIf the user references a docket ID like "EPA-HQ-OAR-2003-0129", call '
        "get_docket directly, or search_comments with that docket ID if they ask "
        "about comments on it."
    ) if "get_docket" in tool_names else ""

    return f"""You are a helpful assistant for Regulations.gov — the U.S. government's official portal for public access to federal regulatory materials. You help users find and understand federal regulations, proposed rules, public comments, and regulatory dockets.

You have access to tools that search and retrieve live data from Regulations.gov:
{tool_lines}

When a user asks a question:
1. Decide what they are looking for: documents (rules/notices), comments (public submissions), or dockets (rulemaking folders).
2. Call the most appropriate tool with a clear, focused search term.
3. After receiving results, summarize what you found in a concise, helpful response. Mention the total count if available.

For direct links to items on regulations.gov use these patterns:
- Document:  {SITE_URL}/document/{{id}}
- Comment:   {SITE_URL}/comment/{{id}}
- Docket:    {SITE_URL}/docket/{{id}}
{document_id_rule}{docket_id_rule}

When no results are found, say so clearly and suggest rephrasing or broadening the search.
When an error occurs, explain what happened and suggest alternatives.
Keep responses concise — the UI will display rich result cards, so you don't need to repeat every field in your text."""
