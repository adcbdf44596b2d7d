#!/usr/bin/env python3
"""MCP Server for the RSU Sale Price calculator.

This server exposes the required sale price calculation as MCP tools,
allowing AI assistants to answer questions like "what price do I need
to sell my remaining shares at to match the vest day value?".
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

from tools import SalePriceTools
from tax.WithholdingDetails import REFERENCE_ENV_VAR


# Create the MCP server
server = Server("rsu-sale-price")

# Global tools instance (initialized on first call)
tools: SalePriceTools | None = None


def get_tools() -> SalePriceTools:
    """Get or initialize the tools instance."""
    global tools
    if tools is None:
        # Withholding reference file can be set via RSU_SALE_PRICE_REFERENCE env var
        tools = SalePriceTools(os.environ.get(REFERENCE_ENV_VAR))
    return tools


NUMBER = ["number", "string"]

# Common calculation input schema
CALCULATION_SCHEMA = {
    "type": "object",
    "properties": {
        "vcd_price": {"type": NUMBER, "description": "VCD (vesting commencement date) price per share"},
        "vesting_shares": {"type": "integer", "description": "Number of shares vesting"},
        "vest_day_price": {"type": NUMBER, "description": "Share price on vest day"},
        "medicare_rate": {"type": NUMBER, "description": "Optional: Medicare rate as a decimal (0.0145 = 1.45%). Defaults to the reference rate."},
        "social_security_rate": {"type": NUMBER, "description": "Optional: Social Security rate as a decimal. Defaults to the reference rate."},
        "federal_rate": {"type": NUMBER, "description": "Optional: federal withholding rate as a decimal. Defaults to the reference rate."},
        "salt_rate": {"type": NUMBER, "description": "Optional: state and local tax rate as a decimal. Defaults to the reference rate."},
        "shares_sold_for_taxes": {"type": "integer", "description": "Number of shares sold to cover withholding"},
        "tax_sale_price": {"type": NUMBER, "description": "Price per share received in the tax sale"},
        "include_capital_gains": {"type": "boolean", "description": "Optional: include short-term capital gains tax on any gain above the vest day price"},
        "include_net_investment_tax": {"type": "boolean", "description": "Optional: add the 3.8% net investment income tax to the capital gains rate"}
    },
    "required": ["vcd_price", "vesting_shares", "vest_day_price", "shares_sold_for_taxes", "tax_sale_price"]
}


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List available sale price tools."""
    return [
        Tool(
            name="get_default_rates",
            description="Get the default withholding rates (federal, Social Security, Medicare, SALT) used when a rate is not supplied.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="describe_fields",
            description="Describe every input and result field with its display name and meaning.",
            inputSchema={
                "type": "object",
                "properties": {},
                "required": []
            }
        ),
        Tool(
            name="validate_inputs",
            description="Check calculation inputs and list every validation error without calculating.",
            inputSchema=CALCULATION_SCHEMA
        ),
        Tool(
            name="calculate_required_sale_price",
            description="Calculate the minimum per-share price for the shares remaining after the sell-to-cover sale so that net proceeds match the vest day value. Returns the withholding breakdown, net income targets, optional capital gains taxes, and a sell/wait recommendation.",
            inputSchema=CALCULATION_SCHEMA
        ),
        Tool(
            name="compare_price_scenarios",
            description="Compare the required sale price without capital gains, with capital gains, and with capital gains plus NIIT, and report the per-share impact of each.",
            inputSchema=CALCULATION_SCHEMA
        )
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls."""
    try:
        sp_tools = get_tools()
        arguments = arguments or {}

        if name == "get_default_rates":
            result = sp_tools.get_default_rates()
        elif name == "describe_fields":
            result = sp_tools.describe_fields()
        elif name == "validate_inputs":
            result = sp_tools.validate_inputs(arguments)
        elif name == "calculate_required_sale_price":
            result = sp_tools.calculate_required_sale_price(arguments)
        elif name == "compare_price_scenarios":
            result = sp_tools.compare_price_scenarios(arguments)
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
