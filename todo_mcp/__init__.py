"""
Todo MCP server
Todo records over JSON-RPC with interactive UI snapshots
"""
__version__ = "1.0.0"
