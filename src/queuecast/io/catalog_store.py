"""Catalog persistence in a per-user JSON file."""

import json
import os
import stat
import tempfile
from pathlib import Path
from typing import Mapping, Optional, Union

from ..core.errors import ConfigurationMissingError, FilesystemError, SerializationError
from ..core.logging import get_logger
from ..core.models import Catalog

logger = get_logger(__name__)

CONFIG_DIR_NAME = "queuecast"
CATALOG_FILE_NAME = "queuecast.json"
CONFIG_DIR_ENV = "QUEUECAST_CONFIG_DIR"


def resolve_home_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve the user's home directory from HOME, falling back to USERPROFILE.

    Raises:
        ConfigurationMissingError: if neither variable is set
    """
    env = os.environ if environ is None else environ
    home = env.get("HOME") or env.get("USERPROFILE")
    if not home:
        raise ConfigurationMissingError("Could not find home directory (HOME or USERPROFILE)")
    return Path(home)


def resolve_config_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    """Resolve the queuecast configuration directory.

    QUEUECAST_CONFIG_DIR wins when set; otherwise ``<home>/.config/queuecast``.
    """
    env = os.environ if environ is None else environ
    override = env.get(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return resolve_home_dir(env) / ".config" / CONFIG_DIR_NAME


class CatalogStore:
    """Loads and saves the whole catalog as one human-readable JSON document."""

    def __init__(self, config_dir: Union[str, Path], catalog_file: str = CATALOG_FILE_NAME):
        """Initialize the catalog store.

        Args:
            config_dir: Directory holding the catalog file (created on demand)
            catalog_file: File name of the catalog inside config_dir
        """
        self.config_dir = Path(config_dir)
        self.catalog_path = self.config_dir / catalog_file
        self.logger = get_logger(__name__)

    def _ensure_config_dir(self) -> None:
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FilesystemError(f"Cannot create config directory {self.config_dir}: {e}") from e

    def load(self) -> Catalog:
        """Load the catalog, returning an empty one when no file exists yet.

        Raises:
            SerializationError: if the file is not valid JSON or holds malformed records
            FilesystemError: if the file cannot be read
        """
        self._ensure_config_dir()

        if not self.catalog_path.exists():
            self.logger.debug(f"No catalog at {self.catalog_path}, starting empty")
            return Catalog()

        try:
            with open(self.catalog_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SerializationError(f"Catalog file {self.catalog_path} is corrupt: {e}") from e
        except UnicodeDecodeError as e:
            raise SerializationError(f"Catalog file {self.catalog_path} is not UTF-8: {e}") from e
        except OSError as e:
            raise FilesystemError(f"Cannot read catalog file {self.catalog_path}: {e}") from e

        try:
            catalog = Catalog.from_dict(data)
        except (KeyError, ValueError, TypeError) as e:
            raise SerializationError(f"Catalog file {self.catalog_path} has an invalid record: {e}") from e

        self.logger.debug(f"Loaded {len(catalog.programs)} programs from {self.catalog_path}")
        return catalog

    def _file_mode(self) -> int:
        """Permissions for the written catalog: the current file's, else the umask default."""
        try:
            return stat.S_IMODE(os.stat(self.catalog_path).st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask

    def save(self, catalog: Catalog) -> None:
        """Write the catalog, atomically replacing the previous file.

        Raises:
            FilesystemError: if the file cannot be written
        """
        self._ensure_config_dir()
        content = json.dumps(catalog.to_dict(), indent=2, ensure_ascii=False)

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=self.config_dir,
                prefix=f".{self.catalog_path.name}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(content)
                tmp.write("\n")
            os.chmod(tmp_name, self._file_mode())
            os.replace(tmp_name, self.catalog_path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise FilesystemError(f"Cannot write catalog file {self.catalog_path}: {e}") from e

        self.logger.debug(f"Saved {len(catalog.programs)} programs to {self.catalog_path}")
