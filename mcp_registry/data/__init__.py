"""
Dataset shape handling for the MCP registry.

This package is responsible for:
* Recognising the legacy flat record shape used by older dataset files.
* Migrating legacy records to the canonical `{server, _meta}` envelope on load.
* Producing the legacy flat shape again for the exported `registry.json`.
"""
