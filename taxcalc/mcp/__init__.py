"""Tax Calc MCP server."""
