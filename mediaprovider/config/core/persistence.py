"""
Settings file persistence for provider stores.

Each provider has one file, ``<directory>/scraper_<provider id>.conf``, made
of ``key=value`` lines. Loading is tolerant: a missing file is a no-op, and
unknown keys, malformed lines and invalid values are skipped. Saving replaces
the file atomically.
"""

import os
import re
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Dict, Iterator, Optional, Tuple

from mediaprovider.config.system import get_system_config
from mediaprovider.core.exceptions import ConfigPersistenceError
from mediaprovider.logger import get_mediaprovider_logger
from .codec import EntryEncryptionCodec, get_codec
from .entry import COMMENT_PREFIX

if TYPE_CHECKING:
    from .store import ConfigStore

_UNESCAPES = {'n': '\n', 'r': '\r', '\\': '\\'}
_ESCAPE_RE = re.compile(r'\\(.)', re.DOTALL)


def escape_value(value: str) -> str:
    """Keep a value on a single line."""
    return value.replace('\\', '\\\\').replace('\n', '\\n').replace('\r', '\\r')


def unescape_value(value: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _UNESCAPES.get(m.group(1), m.group(1)), value)


def parse_lines(lines) -> Iterator[Tuple[str, str]]:
    """Yield ``(key, value)`` pairs, skipping blanks, comments and lines without '='."""
    for line in lines:
        line = line.rstrip('\r\n')
        if not line.strip() or line.lstrip().startswith(COMMENT_PREFIX):
            continue
        key, sep, value = line.partition('=')
        key = key.strip()
        if not sep or not key:
            continue
        yield key, unescape_value(value)


class ConfigPersistence:
    """
    Reads and writes the settings file of a ConfigStore.
    """

    def __init__(self, codec: Optional[EntryEncryptionCodec] = None):
        """
        Args:
            codec: Codec for encrypted entries; the process-wide codec when omitted.
        """
        self._codec = codec
        self.logger = get_mediaprovider_logger().bind(component="ConfigPersistence")

    @property
    def codec(self) -> EntryEncryptionCodec:
        return self._codec or get_codec()

    @staticmethod
    def settings_file(provider_id: str, directory=None) -> Path:
        """Path of the settings file for ``provider_id``."""
        system_config = get_system_config()
        base_dir = Path(directory) if directory is not None else Path(system_config.config_dir)
        return base_dir / system_config.settings_file_name(provider_id)

    def load(self, store: 'ConfigStore', directory=None) -> int:
        """
        Load persisted values into ``store``.

        Values go through the store's validation, so anything invalid is
        ignored. Returns the number of accepted values.

        Raises:
            ConfigPersistenceError: If the file exists but cannot be read
        """
        path = self.settings_file(store.provider_id, directory)

        with store.lock:
            if not path.exists():
                self.logger.debug("No settings file", provider_id=store.provider_id, path=str(path))
                return 0

            try:
                with open(path, 'r', encoding='utf-8') as f:
                    pairs = list(parse_lines(f))
            except (OSError, UnicodeDecodeError) as e:
                raise ConfigPersistenceError(store.provider_id, str(path), str(e)) from e

            accepted = 0
            for key, raw_value in pairs:
                entry = store.get_entry(key)
                if entry is None:
                    self.logger.debug("Skipping unknown key", provider_id=store.provider_id, key=key)
                    continue

                value = raw_value
                if entry.encrypted:
                    value = self.codec.decode(raw_value)
                    if value is None:
                        self.logger.warning("Encrypted value unreadable, using default",
                                            provider_id=store.provider_id, key=key)
                        continue

                if store.apply_persisted_value(key, value):
                    accepted += 1

            self.logger.info("Settings loaded", provider_id=store.provider_id,
                             path=str(path), accepted=accepted, read=len(pairs))
            return accepted

    def save(self, store: 'ConfigStore', directory=None) -> None:
        """
        Write every set value of ``store`` to its settings file.

        The file is written to a temporary sibling and moved into place, so a
        failure leaves the previous file untouched.

        Raises:
            ConfigPersistenceError: If a value cannot be encoded or the directory
                or file cannot be written
        """
        path = self.settings_file(store.provider_id, directory)

        with store.lock:
            try:
                lines = [f"{key}={escape_value(value)}\n"
                         for key, value in self._encode_values(store).items()]
                self._write_file(path, lines)
            except (OSError, UnicodeError) as e:
                self.logger.error("Failed to save settings", provider_id=store.provider_id,
                                  path=str(path), error=str(e))
                raise ConfigPersistenceError(store.provider_id, str(path), str(e)) from e

            self.logger.info("Settings saved", provider_id=store.provider_id,
                             path=str(path), written=len(lines))

    def _encode_values(self, store: 'ConfigStore') -> Dict[str, str]:
        encoded = {}
        for key, value in store.values_snapshot().items():
            entry = store.get_entry(key)
            encoded[key] = self.codec.encode(value) if entry.encrypted else value
        return encoded

    @staticmethod
    def _write_file(path: Path, lines) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.stem}.",
            suffix=".tmp",
        )
        tmp_path = Path(tmp_name)
        try:
            with os.fdopen(fd, 'w', encoding='utf-8', newline='\n') as handle:
                handle.writelines(lines)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, path)
        except Exception:
            try:
                tmp_path.unlink(missing_ok=True)
            finally:
                raise
