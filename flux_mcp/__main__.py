"""Allow `python -m flux_mcp` to run the CLI."""

from flux_mcp.cli import main

main()
