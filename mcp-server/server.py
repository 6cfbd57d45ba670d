#!/usr/bin/env python3
"""MCP Server for Schedio.

This server exposes payday, shift and pay calculations as MCP tools,
allowing AI assistants to answer questions about an officer's schedule
and pay.
"""

import os
import sys
import json
import asyncio
import logging
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProfileTools

# stdout carries the protocol; logs go to stderr
logging.basicConfig(
    level=os.environ.get('SCHEDIO_LOG_LEVEL', 'INFO'),
    format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    stream=sys.stderr,
)
logger = logging.getLogger("schedio.mcp")

# Create the MCP server
server = Server("schedio")

# Global tools instance (initialized on first use)
tools: MultiProfileTools | None = None


def get_tools() -> MultiProfileTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default profile can be set via SCHEDIO_PROFILE env var
        default_profile = os.environ.get('SCHEDIO_PROFILE')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProfileTools(base_path, default_profile)
    return tools


# Common profile parameter schema
PROFILE_PARAM = {
    "type": "string",
    "description": "The profile name (folder in input-parameters). If not specified, uses the default profile. Use list_profiles to see available profiles."
}

DATE_PARAM = {
    "type": "string",
    "description": "Date in YYYY-MM-DD format"
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available schedule and pay tools."""
    return [
        Tool(
            name="list_profiles",
            description="List all available profiles with their hourly rate, overtime multiplier, tax jurisdiction and recurring events.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_profiles",
            description="Reload all profiles from disk. Use this after adding, modifying, or removing profile.json files.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_next_occurrence",
            description="Get the next payday, pay card deadline or other recurring event on or after a reference date.",
            inputSchema={
                "type": "object",
                "properties": {
                    "event_id": {
                        "type": "string",
                        "description": "Optional: recurring event id. If omitted, returns every event."
                    },
                    "reference_date": {**DATE_PARAM, "description": "Optional: reference date in YYYY-MM-DD format (default today)"},
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_occurrences_in_range",
            description="List recurring event dates from start (inclusive) to end (exclusive).",
            inputSchema={
                "type": "object",
                "properties": {
                    "start": {**DATE_PARAM, "description": "Range start in YYYY-MM-DD format (inclusive)"},
                    "end": {**DATE_PARAM, "description": "Range end in YYYY-MM-DD format (exclusive)"},
                    "event_id": {
                        "type": "string",
                        "description": "Optional: recurring event id. If omitted, returns every event."
                    },
                    "max_count": {
                        "type": "integer",
                        "description": "Optional: maximum dates per event (default 10)"
                    },
                    "profile": PROFILE_PARAM
                },
                "required": ["start", "end"]
            }
        ),
        Tool(
            name="get_upcoming_reminders",
            description="Get reminders for shifts and recurring events happening the day after the reference date.",
            inputSchema={
                "type": "object",
                "properties": {
                    "reference_date": {**DATE_PARAM, "description": "Optional: reference date in YYYY-MM-DD format (default today)"},
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_month_summary",
            description="Get shift counts by type, regular and overtime hours, and estimated pay for a calendar month.",
            inputSchema={
                "type": "object",
                "properties": {
                    "year": {"type": "integer", "description": "Calendar year"},
                    "month": {"type": "integer", "description": "Month number 1-12"},
                    "profile": PROFILE_PARAM
                },
                "required": ["year", "month"]
            }
        ),
        Tool(
            name="get_tax_breakdown",
            description="Estimate federal and provincial tax, CPP and EI contributions, net income and effective rate. Give gross_income directly, or year and month to annualize that month's shift pay.",
            inputSchema={
                "type": "object",
                "properties": {
                    "gross_income": {"type": "number", "description": "Optional: annual gross income"},
                    "year": {"type": "integer", "description": "Optional: year of the month to annualize"},
                    "month": {"type": "integer", "description": "Optional: month to annualize"},
                    "profile": PROFILE_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_overtime_pay",
            description="Compute regular, overtime and total pay. Overtime multiplier must be 1.5 or 2.",
            inputSchema={
                "type": "object",
                "properties": {
                    "regular_hours": {"type": "number", "description": "Regular hours worked"},
                    "overtime_hours": {"type": "number", "description": "Overtime hours worked"},
                    "hourly_rate": {"type": "number", "description": "Optional: hourly rate (default from profile)"},
                    "multiplier": {"type": "number", "description": "Optional: 1.5 or 2 (default from profile)"},
                    "profile": PROFILE_PARAM
                },
                "required": ["regular_hours", "overtime_hours"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        schedio_tools = get_tools()
        profile = arguments.get("profile")

        if name == "list_profiles":
            result = schedio_tools.list_profiles()
        elif name == "reload_profiles":
            result = schedio_tools.reload_profiles()
        elif name == "get_next_occurrence":
            result = schedio_tools.get_next_occurrence(
                arguments.get("event_id"),
                arguments.get("reference_date"),
                profile
            )
        elif name == "get_occurrences_in_range":
            result = schedio_tools.get_occurrences_in_range(
                arguments["start"],
                arguments["end"],
                arguments.get("event_id"),
                arguments.get("max_count", 10),
                profile
            )
        elif name == "get_upcoming_reminders":
            result = schedio_tools.get_upcoming_reminders(arguments.get("reference_date"), profile)
        elif name == "get_month_summary":
            result = schedio_tools.get_month_summary(arguments["year"], arguments["month"], profile)
        elif name == "get_tax_breakdown":
            result = schedio_tools.get_tax_breakdown(
                arguments.get("gross_income"),
                arguments.get("year"),
                arguments.get("month"),
                profile
            )
        elif name == "get_overtime_pay":
            result = schedio_tools.get_overtime_pay(
                arguments["regular_hours"],
                arguments["overtime_hours"],
                arguments.get("hourly_rate"),
                arguments.get("multiplier"),
                profile
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
        logger.warning("Tool %s failed: %s", name, e)
        return [TextContent(
            type="text",
            text=json.dumps({"error": str(e)}, indent=2)
        )]


async def main():
    """Run the MCP server."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


if __name__ == "__main__":
    asyncio.run(main())
