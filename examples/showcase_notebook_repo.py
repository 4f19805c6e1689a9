#!/usr/bin/env python3
"""Notebook repository showcase, runs standalone without external services.

Demonstrates:
  - Building a repository from Settings with create_notebook_repo()
  - Saving, listing, loading and removing notes
  - Running paragraphs coming back as ABORT after a reload
  - A corrupt note being skipped by list_notes()
  - Unsupported revision operations returning empty results

Usage:
  python examples/showcase_notebook_repo.py
"""

import asyncio
from pathlib import Path
from tempfile import TemporaryDirectory

from notebook_repo import (
    JobStatus,
    Note,
    Paragraph,
    Settings,
    StorageNotebookRepo,
    create_notebook_repo,
    setup_logging,
)

# ---------------------------------------------------------------------------
# 1. Local filesystem repository
# ---------------------------------------------------------------------------


async def demo_local_repo(root: Path) -> None:
    print("\n=== Local repository Demo ===\n")

    settings = Settings(  # type: ignore[call-arg]
        _env_file=None,
        notebook_storage_uri=str(root),
        notebook_share="zeppelin",
        notebook_user="alice",
    )
    repo = await create_notebook_repo(settings)
    print(f"Notebook root: {repo.root.url_for()}")

    note = Note(
        id="2A94M5J1Z",
        name="Zeppelin Tutorial",
        paragraphs=[
            Paragraph(id="p1", text="%md ## Welcome", status=JobStatus.FINISHED),
            Paragraph(id="p2", text="%sh sleep 600", status=JobStatus.RUNNING),
        ],
    )
    await repo.save(note)
    print(f"Saved {note.id} to {root / 'zeppelin' / 'alice' / 'notebook' / note.id / 'note.json'}")

    loaded = await repo.get(note.id)
    for p in loaded.paragraphs:
        print(f"  {p.id}: {p.status}")

    await repo.root.write_bytes("broken/note.json", b"{not json")
    infos = await repo.list_notes()
    print(f"Listed {len(infos)} note(s): {[i.name for i in infos]}")

    await repo.remove(note.id)
    await repo.remove("broken")
    print(f"After remove: {await repo.list_notes()}")
    repo.close()


# ---------------------------------------------------------------------------
# 2. Memory repository and unsupported capabilities
# ---------------------------------------------------------------------------


async def demo_memory_repo() -> None:
    print("\n=== Memory repository Demo ===\n")

    repo: StorageNotebookRepo = await create_notebook_repo(
        Settings(_env_file=None, notebook_storage_uri="memory://")  # type: ignore[call-arg]
    )
    await repo.save(Note(id="scratch", name="Scratch pad"))

    revision = await repo.checkpoint("scratch", "first draft")
    print(f"checkpoint -> empty revision: {revision.is_empty}")
    print(f"revision_history -> {await repo.revision_history('scratch')}")
    repo.close()


async def run_demos() -> None:
    with TemporaryDirectory() as tmpdir:
        await demo_local_repo(Path(tmpdir))

    await demo_memory_repo()


def main() -> None:
    setup_logging(level="INFO")
    asyncio.run(run_demos())
    print("\nAll demos completed successfully.")


if __name__ == "__main__":
    main()
