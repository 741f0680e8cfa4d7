"""Standalone CLI for managing an owner's documents and asking questions.

Usage::

    python -m design_copilot.cli ingest --owner team-a --file specs/onboarding.pdf

    python -m design_copilot.cli ask --owner team-a "What does the empty state show?"

    python -m design_copilot.cli list --owner team-a

    python -m design_copilot.cli delete --owner team-a 3f2b...

Provider selection is shared with the API server (see
:func:`design_copilot.main.build_components`), so documents ingested here
are queryable from the plugin and vice versa.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

from design_copilot.config.loader import load_config
from design_copilot.config.settings import Settings
from design_copilot.utils.errors import CopilotError


async def _handle_ingest(args: argparse.Namespace, components: dict[str, Any]) -> int:
    path = Path(args.file)
    if not path.is_file():
        print(f"Error: file not found: {path}", file=sys.stderr)
        return 1

    print(f"Ingesting: {path.name}")
    result = await components["ingestion_service"].ingest_file(
        owner_id=args.owner,
        filename=path.name,
        file_bytes=path.read_bytes(),
    )

    print("\nIngestion complete:")
    print(f"  Document ID:   {result.document_id}")
    print(f"  Status:        {result.status.value}")
    print(f"  Chunks stored: {result.chunks_stored}")
    print(f"  Chunks failed: {result.chunks_failed}")
    return 0 if result.succeeded else 1


async def _handle_ask(args: argparse.Namespace, components: dict[str, Any]) -> int:
    answer = await components["qa_service"].answer(owner_id=args.owner, question=args.question)
    print(answer)
    return 0


async def _handle_list(args: argparse.Namespace, components: dict[str, Any]) -> int:
    documents = await components["document_store"].list_documents(args.owner)
    if not documents:
        print(f"No documents for owner '{args.owner}'.")
        return 0

    print(f"{'Document ID':<38} {'Chunks':>6}  Filename")
    print("-" * 70)
    for doc in documents:
        print(f"{doc.document_id:<38} {doc.chunk_count:>6}  {doc.filename}")
    return 0


async def _handle_delete(args: argparse.Namespace, components: dict[str, Any]) -> int:
    deleted = await components["document_store"].delete_document(args.document_id, args.owner)
    if not deleted:
        print(f"Document {args.document_id} not found.", file=sys.stderr)
        return 1
    print(f"Deleted document {args.document_id}.")
    return 0


_HANDLERS = {
    "ingest": _handle_ingest,
    "ask": _handle_ask,
    "list": _handle_list,
    "delete": _handle_delete,
}


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    # Deferred so --help works without provider configuration.
    from design_copilot.main import build_components, open_store

    components = build_components(app_settings, load_config(settings=app_settings))
    await open_store(components)
    try:
        return await _HANDLERS[args.command](args, components)
    finally:
        await components["document_store"].close()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the design copilot CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m design_copilot.cli",
        description="Ingest design documents and ask questions about them.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # -- ingest --
    ingest_parser = subparsers.add_parser("ingest", help="Ingest a .txt, .md, .csv or .pdf file")
    ingest_parser.add_argument("--owner", required=True, help="Owner identity")
    ingest_parser.add_argument("--file", required=True, help="Path to the file")

    # -- ask --
    ask_parser = subparsers.add_parser("ask", help="Ask a question about the owner's documents")
    ask_parser.add_argument("--owner", required=True, help="Owner identity")
    ask_parser.add_argument("question", help="Question text")

    # -- list --
    list_parser = subparsers.add_parser("list", help="List the owner's documents")
    list_parser.add_argument("--owner", required=True, help="Owner identity")

    # -- delete --
    delete_parser = subparsers.add_parser("delete", help="Delete a document and its chunks")
    delete_parser.add_argument("--owner", required=True, help="Owner identity")
    delete_parser.add_argument("document_id", help="Document ID to delete")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse the subcommand and dispatch to its handler."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    try:
        exit_code = asyncio.run(_run(args, app_settings))
    except CopilotError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
