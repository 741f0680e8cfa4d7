"""Command-line tools for the design copilot backend.

- ``python -m design_copilot.cli ingest`` -- extract and ingest a local file
- ``python -m design_copilot.cli ask`` -- answer a question from the owner's documents
- ``python -m design_copilot.cli list`` / ``delete`` -- manage stored documents

argparse only; providers are built on demand inside each command.
"""
