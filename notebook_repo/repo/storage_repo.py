"""Notebook repository over a container/leaf storage tree.

Layout:
    {notebook_root}/{note_id}/note.json   <- pretty-printed note

There is no index or manifest: the set of notes is whatever containers under
the notebook root hold a note.json. Concurrent writers to the same note are
not coordinated (last write wins).
"""

from collections.abc import Iterator
from contextlib import contextmanager
from logging import Logger
from typing import Self

from notebook_repo.exceptions import (
    DeserializationError,
    NotebookIOError,
    NotebookRepoError,
    NoteNotFoundError,
)
from notebook_repo.logging import get_pipeline_logger
from notebook_repo.notes import Note, NoteInfo, NoteSerializer
from notebook_repo.repo._paths import ensure_notebook_root, note_dir, note_file, notebook_root
from notebook_repo.repo.protocol import (
    EMPTY_REVISION,
    AuthenticationInfo,
    NotebookRepoSettingsInfo,
    Revision,
)
from notebook_repo.storage import EntryKind, Storage, StorageEntry


class StorageNotebookRepo:
    """Stores each note as ``{note_id}/note.json`` below a notebook root.

    Use ``await StorageNotebookRepo.create(storage, user=...)`` to resolve
    and create the notebook root; the constructor takes an already resolved
    root and performs no I/O.

    Revision and settings operations are accepted but unsupported: they log
    a warning and return empty results.
    """

    def __init__(
        self,
        root: Storage,
        *,
        serializer: NoteSerializer | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._root = root
        self._serializer = serializer or NoteSerializer()
        self._logger = logger or get_pipeline_logger(__name__)
        self._closed = False

    @classmethod
    async def create(
        cls,
        storage: Storage,
        *,
        user: str = "",
        encoding: str = "UTF-8",
        serializer: NoteSerializer | None = None,
        logger: Logger | None = None,
    ) -> Self:
        """Build a repository rooted at ``storage / user? / "notebook"``.

        Raises:
            NotebookIOError: If the notebook root cannot be created.
        """
        repo = cls(
            notebook_root(storage, user),
            serializer=serializer or NoteSerializer(encoding),
            logger=logger,
        )
        with repo._io("creating root for", ""):
            await ensure_notebook_root(storage, user)
        return repo

    @property
    def root(self) -> Storage:
        """Container holding one directory per note."""
        return self._root

    @contextmanager
    def _io(self, operation: str, note_id: str) -> Iterator[None]:
        """Translate backend OSErrors into repository errors carrying operation and id."""
        try:
            yield
        except FileNotFoundError as e:
            msg = f"Notebook {note_id} not found in {self._root.url_for()}"
            self._logger.error(msg)
            raise NoteNotFoundError(msg, note_id=note_id, operation=operation) from e
        except OSError as e:
            msg = f"Error {operation} notebook {note_id} in {self._root.url_for()}: {e}"
            self._logger.error(msg)
            raise NotebookIOError(msg, note_id=note_id, operation=operation) from e

    @staticmethod
    def _check_id(note_id: str) -> None:
        """Note ids are single path segments; anything else would address the root or beyond."""
        if not note_id or not note_id.strip():
            raise ValueError("note_id must be a non-empty string")
        if note_id in (".", "..") or "/" in note_id or "\\" in note_id:
            raise ValueError(f"note_id must be a single path segment, got {note_id!r}")

    async def list_notes(self, subject: AuthenticationInfo | None = None) -> list[NoteInfo]:
        """Summaries of every readable note, in no particular order.

        A note that cannot be probed, read or parsed is logged and skipped.

        Raises:
            NotebookIOError: If the notebook root itself cannot be enumerated.
        """
        with self._io("listing", ""):
            entries = await self._root.list_entries()

        infos: list[NoteInfo] = []
        for entry in entries:
            if not entry.is_container:
                continue
            try:
                with self._io("probing", entry.name):
                    if not await self._root.exists(note_file(entry.name)):
                        continue
                note = await self.get(entry.name, subject)
            except NotebookRepoError as e:
                self._logger.error(f"Skipping notebook {entry.name} while listing: {e}")
                continue
            infos.append(NoteInfo.from_note(note))
        return infos

    async def get(self, note_id: str, subject: AuthenticationInfo | None = None) -> Note:
        """Read and parse a note. Every call goes to the backend.

        Raises:
            NoteNotFoundError: If the note has no note.json.
            NotebookIOError: If the backend read fails.
            DeserializationError: If the stored content is not a valid note.
        """
        self._check_id(note_id)
        with self._io("reading", note_id):
            data = await self._root.read_bytes(note_file(note_id))
        try:
            return self._serializer.deserialize(data)
        except DeserializationError as e:
            msg = f"Error parsing notebook {note_id}: {e}"
            self._logger.error(msg)
            raise DeserializationError(msg) from e

    async def save(self, note: Note, subject: AuthenticationInfo | None = None) -> None:
        """Overwrite the stored note in full, creating its directory when needed.

        Raises:
            ValueError: If the note id is not a single path segment.
            SerializationError: If the note cannot be encoded.
            NotebookIOError: If the directory cannot be created or the file written.
        """
        self._check_id(note.id)
        data = self._serializer.serialize(note)
        with self._io("saving", note.id):
            await self._root.ensure_container(note_dir(note.id))
            await self._root.write_bytes(note_file(note.id), data)

    async def remove(self, note_id: str, subject: AuthenticationInfo | None = None) -> None:
        """Delete the note directory and everything below it. Missing entries are ignored.

        Raises:
            NotebookIOError: On backend faults other than already-missing entries.
        """
        self._check_id(note_id)
        with self._io("deleting", note_id):
            await self._delete_tree(StorageEntry(name=note_id, path=note_dir(note_id), kind=EntryKind.CONTAINER))

    async def _delete_tree(self, entry: StorageEntry) -> None:
        # children first; a container must be empty before it is deleted
        if entry.is_container:
            for child in await self._root.list_entries(entry.path):
                await self._delete_tree(child)
        await self._root.delete_if_exists(entry)

    def close(self) -> None:
        if self._closed:
            return
        self._root.close()
        self._closed = True

    # --- Unsupported capabilities ---

    def _unsupported(self, feature: str) -> None:
        self._logger.warning(f"{feature} feature isn't supported in {type(self).__name__}")

    async def checkpoint(self, note_id: str, checkpoint_msg: str, subject: AuthenticationInfo | None = None) -> Revision:
        self._unsupported("Checkpoint")
        return EMPTY_REVISION

    async def get_revision(self, note_id: str, revision_id: str, subject: AuthenticationInfo | None = None) -> Note | None:
        self._unsupported("Get note revision")
        return None

    async def revision_history(self, note_id: str, subject: AuthenticationInfo | None = None) -> list[Revision]:
        self._unsupported("Get note revisions")
        return []

    async def get_settings(self, subject: AuthenticationInfo | None = None) -> list[NotebookRepoSettingsInfo]:
        self._unsupported("Get settings")
        return []

    async def update_settings(self, settings: dict[str, str], subject: AuthenticationInfo | None = None) -> None:
        self._unsupported("Update settings")

    async def set_note_revision(self, note_id: str, revision_id: str, subject: AuthenticationInfo | None = None) -> Note | None:
        self._unsupported("Set note revision")
        return None
