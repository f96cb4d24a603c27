"""MCP server exposing the SAP ABAP Development Tools (ADT) REST API."""

__version__ = "0.1.0"
