"""Configuration settings for notebook storage.

@public

Settings are loaded from environment variables with .env file support via
pydantic-settings. Everything here is supplied externally; the repository
never derives any of these values itself.

Environment variables:
    NOTEBOOK_STORAGE_URI: Backend connection descriptor (path, file://, gs://, memory://)
    NOTEBOOK_SHARE: Root container name under the storage URI
    NOTEBOOK_USER: Optional scope segment (per-user namespace)
    NOTEBOOK_ENCODING: Text encoding of persisted notes
    GCS_BLOCK: Saved Prefect GcsBucket block name (gs:// only)
    GCS_SERVICE_ACCOUNT_FILE: Service account JSON key (gs:// only)

Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file in current directory
    3. Default values

Example:
    >>> from notebook_repo.settings import settings
    >>> print(settings.notebook_storage_uri)

.env file format:
    NOTEBOOK_STORAGE_URI=gs://my-bucket/notebooks
    NOTEBOOK_SHARE=zeppelin
    NOTEBOOK_USER=alice
    GCS_SERVICE_ACCOUNT_FILE=/secrets/gcs.json

Note:
    Settings are loaded once at module import and frozen. The process must
    be restarted to pick up changes to environment variables or .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Configuration for the notebook storage backend.

    @public

    Attributes:
        notebook_storage_uri: Where notes live. A plain path or file:// URI
                              selects the local filesystem, gs://bucket/prefix
                              selects Google Cloud Storage and memory:// keeps
                              everything in process.

        notebook_share: Root container created under the storage URI. All
                        notebooks of this installation live below it.

        notebook_user: Optional scope segment placed between the root
                       container and the "notebook" directory. Empty means
                       notes are stored directly under the root container.

        notebook_encoding: Text encoding used to write and read note.json.

        gcs_block: Name of a saved Prefect GcsBucket block. When set it is
                   used instead of building a bucket from the URI.

        gcs_service_account_file: Path to a service account key used when
                                  building the bucket from the URI.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    notebook_storage_uri: str = "./notebooks"
    notebook_share: str = "zeppelin"
    notebook_user: str = ""
    notebook_encoding: str = "UTF-8"

    # Google Cloud Storage
    gcs_block: str = ""
    gcs_service_account_file: str = ""


settings = Settings()
"""Global settings instance.

@public
"""
