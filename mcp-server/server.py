#!/usr/bin/env python3
"""MCP Server for the Finance Course calculator.

This server exposes the course calculations as MCP tools, allowing AI
assistants to answer questions about a student's budget, taxes, savings
goals, mortgage and retirement plan.
"""

import os
import sys
import json
import asyncio
from typing import Any

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import Tool, TextContent

from tools import MultiProgramTools


# Create the MCP server
server = Server("finance-course")

# Global tools instance (initialized on startup)
tools: MultiProgramTools | None = None


def get_tools() -> MultiProgramTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Default program can be set via FINANCE_COURSE_PROGRAM env var
        default_program = os.environ.get('FINANCE_COURSE_PROGRAM')
        base_path = os.path.join(os.path.dirname(__file__), '..')
        tools = MultiProgramTools(base_path, default_program)
    return tools


# Common program parameter schema
PROGRAM_PARAM = {
    "type": "string",
    "description": "The program name (folder in input-parameters). If not specified, uses the default program. Use list_programs to see available programs."
}


def _program_only_schema() -> dict:
    return {
        "type": "object",
        "properties": {
            "program": PROGRAM_PARAM
        },
        "required": []
    }


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available course calculator tools."""
    return [
        Tool(
            name="list_programs",
            description="List all available programs with their income, state and filing status.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="reload_programs",
            description="Reload all programs from disk. Use this after adding, modifying, or removing program spec.json files to refresh the cache without restarting the server.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="get_financial_summary",
            description="Get federal, state, city, Social Security and Medicare taxes and after-tax income, for both the suggested pre-tax expenses and the amounts the user entered.",
            inputSchema=_program_only_schema()
        ),
        Tool(
            name="get_budget",
            description="Get the recommended budget (percent and yearly amount per item, with IRS retirement limits applied) next to the amounts entered, and whether entered amounts exceed after-tax income.",
            inputSchema={
                "type": "object",
                "properties": {
                    "section": {
                        "type": "string",
                        "description": "Optional: a single budget section id (housing, food, transportation, insurance, debt, savings, retirement, lifestyle, miscellaneous)"
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_savings_goals",
            description="Get each savings goal with the months to reach it or the monthly amount needed, and its share of monthly after-tax income.",
            inputSchema=_program_only_schema()
        ),
        Tool(
            name="get_mortgage",
            description="Get monthly, bi-weekly and accelerated bi-weekly mortgage payments, total interest, payoff time and the monthly cost of ownership.",
            inputSchema={
                "type": "object",
                "properties": {
                    "include_schedule": {
                        "type": "boolean",
                        "description": "Include every row of each amortization schedule (default false)"
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_retirement_projection",
            description="Get the retirement account projection (weighted return, ending balance and withdrawals in future and present value) and the 401(k) employer match comparison.",
            inputSchema={
                "type": "object",
                "properties": {
                    "age": {
                        "type": "integer",
                        "description": "Optional: return only the row for this age instead of the full series"
                    },
                    "program": PROGRAM_PARAM
                },
                "required": []
            }
        ),
        Tool(
            name="get_credit_card_payoff",
            description="Compare paying only the credit card minimum with paying the chosen amount: months to payoff and total interest.",
            inputSchema=_program_only_schema()
        ),
        Tool(
            name="compare_health_plans",
            description="Compare the yearly cost of the two health plans for the expected medical expenses.",
            inputSchema=_program_only_schema()
        ),
        Tool(
            name="calculate_bracket_tax",
            description="Calculate income tax on any taxable income for the federal brackets, a state's brackets, or New York City, with the bracket-by-bracket breakdown. Does not use a program.",
            inputSchema={
                "type": "object",
                "properties": {
                    "taxable_income": {
                        "type": "number",
                        "description": "Taxable income after deductions"
                    },
                    "jurisdiction": {
                        "type": "string",
                        "enum": ["federal", "state", "city"],
                        "description": "Which brackets to use (default federal)"
                    },
                    "state": {
                        "type": "string",
                        "description": "Two-letter state code, required for jurisdiction 'state'"
                    }
                },
                "required": ["taxable_income"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        fc_tools = get_tools()
        program = arguments.get("program")

        if name == "list_programs":
            result = fc_tools.list_programs()
        elif name == "reload_programs":
            result = fc_tools.reload_programs()
        elif name == "get_financial_summary":
            result = fc_tools.get_financial_summary(program)
        elif name == "get_budget":
            result = fc_tools.get_budget(arguments.get("section"), program)
        elif name == "get_savings_goals":
            result = fc_tools.get_savings_goals(program)
        elif name == "get_mortgage":
            result = fc_tools.get_mortgage(bool(arguments.get("include_schedule", False)), program)
        elif name == "get_retirement_projection":
            result = fc_tools.get_retirement_projection(arguments.get("age"), program)
        elif name == "get_credit_card_payoff":
            result = fc_tools.get_credit_card_payoff(program)
        elif name == "compare_health_plans":
            result = fc_tools.compare_health_plans(program)
        elif name == "calculate_bracket_tax":
            result = fc_tools.calculate_bracket_tax(
                arguments["taxable_income"],
                arguments.get("jurisdiction", "federal"),
                arguments.get("state")
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(
            type="text",
            text=json.dumps(result, indent=2, default=str)
        )]
    except Exception as e:
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
