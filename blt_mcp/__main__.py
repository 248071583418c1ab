"""Entrypoint for ``python -m blt_mcp``."""

from blt_mcp.server import main

if __name__ == "__main__":
    main()
