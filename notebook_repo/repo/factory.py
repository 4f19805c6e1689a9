"""Factory function for creating a notebook repository from settings."""

from logging import Logger

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError

from notebook_repo.exceptions import BackendUnavailableError, NotebookIOError
from notebook_repo.repo.storage_repo import StorageNotebookRepo
from notebook_repo.settings import Settings
from notebook_repo.settings import settings as default_settings
from notebook_repo.storage import Storage


async def create_notebook_repo(
    settings: Settings | None = None,
    *,
    logger: Logger | None = None,
) -> StorageNotebookRepo:
    """Create a StorageNotebookRepo rooted at ``{storage_uri}/{share}/{user?}/notebook``.

    Every backend option comes from ``settings``, including the GCS block
    and service account key.

    Raises:
        BackendUnavailableError: If the storage URI or encoding is unusable, credentials or
            the GcsBucket block cannot be loaded, or the notebook root cannot
            be created.
    """
    settings = settings or default_settings
    uri = settings.notebook_storage_uri
    try:
        storage = Storage.from_uri(
            uri,
            gcs_block=settings.gcs_block,
            service_account_file=settings.gcs_service_account_file,
        ).with_base(settings.notebook_share)
        return await StorageNotebookRepo.create(
            storage,
            user=settings.notebook_user,
            encoding=settings.notebook_encoding,
            logger=logger,
        )
    except NotebookIOError as e:
        raise BackendUnavailableError(f"Notebook storage {storage.url_for()} is unavailable: {e}") from e
    except (GoogleAuthError, GoogleAPIError, ValueError, LookupError, OSError) as e:
        raise BackendUnavailableError(f"Cannot open notebook storage {uri}: {e}") from e
