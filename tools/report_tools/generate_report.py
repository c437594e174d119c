# --- START OF FILE generate_report.py ---

from typing import Dict, List, Tuple
from mcp.server.fastmcp import FastMCP

from context import AppContext, get_app_context
from tools.common import run_page
from logging_config import get_logger

logger = get_logger(__name__)

# Section headings are tagged by the first keyword they contain
SECTION_CATEGORIES: List[Tuple[Tuple[str, ...], str, str]] = [
    (("executive",), "executive", "█"),
    (("system", "operational"), "operations", "▮"),
    (("inventory",), "inventory", "◆"),
    (("alert", "risk"), "risk", "⚠"),
    (("performance", "metric"), "performance", "◈"),
    (("bottleneck", "constraint"), "bottleneck", "✕"),
    (("optimization", "opportunity"), "opportunity", "▲"),
    (("action", "plan"), "action", "→"),
]


def classify_section(heading: str) -> Tuple[str, str]:
    """(category, icon) for a report section heading."""
    text = heading.lower()
    for keywords, category, icon in SECTION_CATEGORIES:
        if any(keyword in text for keyword in keywords):
            return category, icon
    return "general", "•"


def split_report_sections(report: str) -> Dict:
    """
    Split the markdown report into its title and level-2 sections.
    Text before the first section heading becomes the preamble.
    """
    title = ""
    preamble: List[str] = []
    sections: List[Dict] = []

    for line in report.splitlines():
        stripped = line.strip()
        if stripped.startswith("## ") and not stripped.startswith("### "):
            heading = stripped[3:].strip()
            category, icon = classify_section(heading)
            sections.append({"heading": heading, "category": category, "icon": icon, "lines": []})
        elif stripped.startswith("# ") and not title and not sections:
            title = stripped[2:].strip()
        elif sections:
            sections[-1]["lines"].append(line)
        else:
            preamble.append(line)

    for section in sections:
        section["body"] = "\n".join(section.pop("lines")).strip()

    return {"title": title, "preamble": "\n".join(preamble).strip(), "sections": sections}


def render_report(report: str) -> str:
    if not report.strip():
        return "📄 The server returned an empty report."
    parsed = split_report_sections(report)
    if not parsed["sections"]:
        return report

    parts = [f"📊 **{parsed['title'] or 'Operations Report'}**"]
    if parsed["preamble"]:
        parts.append(parsed["preamble"])
    for section in parsed["sections"]:
        parts.append(f"{section['icon']} **{section['heading']}** [{section['category']}]\n{section['body']}")
    return "\n\n".join(parts)


async def show_report(app_ctx: AppContext) -> str:
    return await run_page(app_ctx, "ai-report", app_ctx.client.generate_report, render_report)


def register_ai_report_tools(mcp: FastMCP):
    """Register the AI report tool."""

    logger.info("Registering AI report tools with MCP server")

    @mcp.tool()
    async def generate_report() -> str:
        """
        Generates an AI-written operations report covering inventory, alerts,
        performance and recommended actions across the user's warehouses.
        """
        try:
            return await show_report(get_app_context(mcp))
        except Exception as e:
            logger.exception("Report generation error")
            return f"❌ Failed to generate report: {str(e)}"


# --- END OF FILE generate_report.py ---
