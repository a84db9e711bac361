"""Concrete implementation of the file-based Caching Service.

Every item is kept as two files in ``{root}/{instance}/{namespace}/``:

- ``{name}-cache.json``: the encoded value, no envelope
- ``{name}-cache-metadata.json``: ``{"ttl_secs":..,"created_unixtime":..}``

Expiry is evaluated lazily on ``get``; there is no background sweep and no
in-memory index. Metadata is always written before the data file, and any
inconsistency found on read (orphan data, corrupt metadata, corrupt data)
removes both files and is reported as a miss.

Not safe for concurrent writers to the same item.
"""

import logging
import shutil
import time
from pathlib import Path
from typing import Any, Callable, Optional, Tuple, TypeVar, Union

# Domain Layer Imports
from filecache.domain.errors import CacheClockError, CacheEncodingError, CacheIOError
from filecache.domain.events.cache_events import (
    MISS_DATA_MISSING,
    MISS_ORPHAN,
    MISS_UNKNOWN,
    REPAIR_CORRUPT_DATA,
    REPAIR_CORRUPT_METADATA,
    REPAIR_ORPHAN_DATA,
    CacheCleared,
    CacheEventListener,
    CacheHit,
    CacheItemDeleted,
    CacheItemExpired,
    CacheItemRepaired,
    CacheItemStored,
    CacheMiss,
)
from filecache.domain.interfaces.cache import CacheService
from filecache.domain.interfaces.codec import Codec
from filecache.domain.models.common import (
    InstanceName,
    MAX_U64,
    ItemName,
    Namespace,
    TtlSeconds,
    UnixTime,
    require_non_blank,
)
from filecache.domain.models.metadata import CacheItemMetadata
from filecache.infrastructure.codecs.json_codec import JsonCodec

logger = logging.getLogger(__name__)

T = TypeVar("T")

DATA_FILE_SUFFIX = "-cache.json"
METADATA_FILE_SUFFIX = "-cache-metadata.json"

# Raised by caller factories that cannot build their type from decoded data
FACTORY_ERRORS = (TypeError, ValueError, KeyError)


class FileCacheService(CacheService):
    """File cache with per-item TTL, stored as JSON documents on the local disk."""

    def __init__(
        self,
        root_path: Union[str, Path],
        instance_name: InstanceName,
        codec: Optional[Codec] = None,
        clock: Callable[[], float] = time.time,
        listener: Optional[CacheEventListener] = None,
    ):
        """Initializes the cache service, creating the root directory if missing.

        Args:
            root_path: Root directory of the cache (created with its parents).
            instance_name: Name of the owning application, first directory level.
            codec: Value codec, JsonCodec by default.
            clock: Returns the current time in seconds since the epoch.
            listener: Optional callable receiving cache events.

        Raises:
            ValueError: If root_path or instance_name is blank.
            CacheIOError: If the root directory cannot be created.
        """
        require_non_blank(str(root_path), "root_path")
        self._root_path = Path(root_path)
        self._instance_name = InstanceName(require_non_blank(instance_name, "instance_name"))
        self._codec = codec or JsonCodec()
        self._clock = clock
        self._listener = listener

        logger.info(f"Create file cache service, root path '{self._root_path}', cache name '{self._instance_name}'")
        if not self._root_path.is_dir():
            self._make_dirs(self._root_path)
            logger.info(f"Root path has been created for file cache service '{self._root_path}'")

    @property
    def root_path(self) -> Path:
        return self._root_path

    @property
    def instance_name(self) -> InstanceName:
        return self._instance_name

    # --- Paths ---

    def _namespace_dir(self, namespace: Namespace) -> Path:
        return self._root_path / self._instance_name / namespace

    def _item_paths(self, namespace: Namespace, name: ItemName) -> Tuple[Path, Path]:
        """Returns (metadata path, data path) for an item."""
        directory = self._namespace_dir(namespace)
        return directory / f"{name}{METADATA_FILE_SUFFIX}", directory / f"{name}{DATA_FILE_SUFFIX}"

    # --- Clock ---

    def current_unixtime(self) -> UnixTime:
        """Current time in whole seconds since the epoch.

        Raises:
            CacheClockError: If the clock reads before the epoch.
        """
        now = self._clock()
        if now < 0:
            raise CacheClockError(f"system clock is before the Unix epoch: {now}")
        return UnixTime(int(now))

    # --- File helpers ---

    def _make_dirs(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create cache directory {path}: {e}")
            raise CacheIOError(f"cannot create directory '{path}': {e}", path) from e

    def _write_file(self, path: Path, payload: bytes) -> None:
        try:
            path.write_bytes(payload)
        except OSError as e:
            logger.error(f"Failed to write cache file {path}: {e}")
            raise CacheIOError(f"cannot write '{path}': {e}", path) from e

    def _read_file(self, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            logger.error(f"Failed to read cache file {path}: {e}")
            raise CacheIOError(f"cannot read '{path}': {e}", path) from e

    def _remove_file(self, path: Path) -> bool:
        """Removes a file if it exists. Returns True if a file was removed."""
        if not path.exists():
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to remove cache file {path}: {e}")
            raise CacheIOError(f"cannot remove '{path}': {e}", path) from e
        logger.debug(f"Removed cache file '{path}'")
        return True

    def _remove_item_files(self, metadata_path: Path, data_path: Path) -> Tuple[str, ...]:
        """Removes data then metadata, returning the names of removed files."""
        removed = []
        if self._remove_file(data_path):
            removed.append(data_path.name)
        if self._remove_file(metadata_path):
            removed.append(metadata_path.name)
        return tuple(removed)

    def _emit(self, event: object) -> None:
        if self._listener is not None:
            self._listener(event)

    # --- Metadata ---

    def _read_metadata(self, metadata_path: Path) -> CacheItemMetadata:
        return CacheItemMetadata.from_json(self._read_file(metadata_path))

    def get_metadata(self, namespace: Namespace, name: ItemName) -> Optional[CacheItemMetadata]:
        """Returns the metadata of an item without validating or repairing it.

        Missing or corrupt metadata is reported as None.
        """
        metadata_path, _ = self._item_paths(namespace, name)
        if not metadata_path.is_file():
            return None
        try:
            return self._read_metadata(metadata_path)
        except CacheEncodingError as e:
            logger.debug(f"Unreadable metadata at '{metadata_path}': {e}")
            return None

    # --- CacheService Interface Implementation ---

    def store(self, namespace: Namespace, name: ItemName, value: Any, ttl_secs: TtlSeconds = 0) -> None:
        """Stores an item, overwriting any previous item under the same key.

        The value is encoded before anything is written. Metadata is written
        strictly before the data file, so an interrupted store never leaves a
        fresh data file behind stale or missing metadata.

        Raises:
            ValueError: If ttl_secs is not an integer in the unsigned 64-bit range.
            CacheEncodingError: If the value cannot be encoded.
            CacheClockError: If the clock is before the epoch.
            CacheIOError: If a directory or file operation fails.
        """
        if isinstance(ttl_secs, bool) or not isinstance(ttl_secs, int) or not 0 <= ttl_secs <= MAX_U64:
            raise ValueError(f"ttl_secs must be an integer between 0 and {MAX_U64}, got {ttl_secs!r}")
        logger.info(f"Store entity '{name}' into file cache namespace '{namespace}'")

        payload = self._codec.encode(value)
        metadata = CacheItemMetadata(ttl_secs=TtlSeconds(ttl_secs), created_unixtime=self.current_unixtime())

        namespace_dir = self._namespace_dir(namespace)
        if not namespace_dir.is_dir():
            self._make_dirs(namespace_dir)
        logger.debug(f"Cache item path '{namespace_dir}'")

        metadata_path, data_path = self._item_paths(namespace, name)
        self._write_file(metadata_path, metadata.to_json())

        logger.debug(f"Destination file path '{data_path}'")
        self._remove_file(data_path)
        self._write_file(data_path, payload)

        logger.info(f"Item '{name}' has been saved into file cache")
        self._emit(CacheItemStored(namespace=namespace, name=name, ttl_secs=ttl_secs, size_bytes=len(payload)))

    def get(
        self,
        namespace: Namespace,
        name: ItemName,
        factory: Optional[Callable[[Any], T]] = None,
    ) -> Optional[Any]:
        """Retrieves an item, or None if it is unknown, expired or corrupt.

        Unknown, expired and corrupt items are cleaned up on the way. Only
        file system failures (including failures while cleaning up) and clock
        failures are raised.
        """
        logger.debug(f"Get entity from file cache: namespace='{namespace}', item_name='{name}'")
        metadata_path, data_path = self._item_paths(namespace, name)

        if not metadata_path.is_file():
            if data_path.exists():
                logger.warning(f"Cache item '{name}' has no metadata, removing orphan data file '{data_path}'")
                removed = self._remove_item_files(metadata_path, data_path)
                self._emit(CacheItemRepaired(namespace=namespace, name=name, reason=REPAIR_ORPHAN_DATA, removed=removed))
                self._emit(CacheMiss(namespace=namespace, name=name, reason=MISS_ORPHAN))
            else:
                logger.debug(f"File cache entity '{name}' wasn't found")
                self._emit(CacheMiss(namespace=namespace, name=name, reason=MISS_UNKNOWN))
            return None

        try:
            metadata = self._read_metadata(metadata_path)
        except CacheEncodingError as e:
            logger.warning(f"Couldn't decode metadata of cache item '{name}': {e}. Removing.")
            removed = self._remove_item_files(metadata_path, data_path)
            self._emit(CacheItemRepaired(namespace=namespace, name=name, reason=REPAIR_CORRUPT_METADATA, removed=removed))
            return None

        now = self.current_unixtime()
        if metadata.is_expired(now):
            logger.debug(f"Cache item '{name}' expired (ttl={metadata.ttl_secs}s). Removing files.")
            self._remove_item_files(metadata_path, data_path)
            self._emit(CacheItemExpired(
                namespace=namespace,
                name=name,
                ttl_secs=metadata.ttl_secs,
                age_secs=now - metadata.created_unixtime,
            ))
            return None

        if not data_path.is_file():
            logger.debug(f"Cache item '{name}' has metadata but no data file")
            self._emit(CacheMiss(namespace=namespace, name=name, reason=MISS_DATA_MISSING))
            return None

        try:
            value = self._codec.decode(self._read_file(data_path))
            if factory is not None:
                value = factory(value)
        except (CacheEncodingError,) + FACTORY_ERRORS as e:
            logger.warning(f"Couldn't deserialize cache item '{name}': {e}. Removing.")
            removed = self._remove_item_files(metadata_path, data_path)
            self._emit(CacheItemRepaired(namespace=namespace, name=name, reason=REPAIR_CORRUPT_DATA, removed=removed))
            return None

        logger.debug(f"Entity '{name}' has been loaded from file cache")
        self._emit(CacheHit(namespace=namespace, name=name))
        return value

    def delete(self, namespace: Namespace, name: ItemName) -> bool:
        """Deletes an item's data and metadata files."""
        metadata_path, data_path = self._item_paths(namespace, name)
        removed = self._remove_item_files(metadata_path, data_path)
        if removed:
            logger.info(f"Deleted cache item '{name}' from namespace '{namespace}'")
            self._emit(CacheItemDeleted(namespace=namespace, name=name))
        return bool(removed)

    def clear(self, namespace: Optional[Namespace] = None) -> None:
        """Removes a namespace directory, or the whole instance directory."""
        if namespace is None:
            target = self._root_path / self._instance_name
        else:
            target = self._namespace_dir(namespace)

        if not target.exists():
            logger.info(f"Cache directory {target} does not exist, nothing to clear.")
            return
        try:
            shutil.rmtree(target)
        except OSError as e:
            logger.error(f"Failed to clear cache directory {target}: {e}")
            raise CacheIOError(f"cannot clear '{target}': {e}", target) from e
        logger.info(f"Cleared file cache at: {target}")
        self._emit(CacheCleared(instance=self._instance_name, namespace=namespace or ""))
