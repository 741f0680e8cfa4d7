"""Allow ``python -m design_copilot.cli`` execution."""

from design_copilot.cli.ingest import main

main()
