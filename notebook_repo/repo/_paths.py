"""Mapping of note ids onto the storage tree.

Layout:
    {root}/{user}/notebook/{note_id}/note.json   <- user scope set
    {root}/notebook/{note_id}/note.json          <- blank user

Note ids are used verbatim as directory names.
"""

from notebook_repo.storage import Storage

NOTEBOOK_DIR = "notebook"
NOTE_FILE = "note.json"


def notebook_root(storage: Storage, user: str = "") -> Storage:
    """Scoped view of the container holding one directory per note. No I/O."""
    scoped = storage.with_base(user) if user and user.strip() else storage
    return scoped.with_base(NOTEBOOK_DIR)


async def ensure_notebook_root(storage: Storage, user: str = "") -> Storage:
    """Create every level of the notebook root. Idempotent."""
    root = notebook_root(storage, user)
    await root.ensure_container()
    return root


def note_dir(note_id: str) -> str:
    return note_id


def note_file(note_id: str) -> str:
    return f"{note_dir(note_id)}/{NOTE_FILE}"
