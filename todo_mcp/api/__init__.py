"""
HTTP API for the Todo MCP server
"""
