"""
Issuance Ledger - Registry Storage Backend

This module provides JSON-based persistence of ledger snapshots with
inter-process locking, atomic updates, checksums, and backup rotation.
"""

import hashlib
import json
import logging
import os
import shutil
import time
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from threading import RLock
from typing import Any, Dict, List, Union

from pydantic import ValidationError

from .schema import LedgerSnapshot


class StorageError(Exception):
    """Base storage exception."""
    pass


class LockTimeoutError(StorageError):
    """Lock acquisition timeout exception."""
    pass


class IntegrityError(StorageError):
    """File integrity check failure exception."""
    pass


class LedgerNotInitializedError(StorageError):
    """No ledger has been created in the storage directory."""
    pass


class FileLock:
    """Lock-file based mutual exclusion between processes."""

    def __init__(self, file_path: Union[str, Path], timeout: float = 10.0):
        self.file_path = Path(file_path)
        self.lock_file_path = self.file_path.with_suffix(self.file_path.suffix + '.lock')
        self.timeout = timeout
        self.lock_fd = None
        self._thread_lock = RLock()

    def acquire(self) -> bool:
        """Acquire file lock with timeout."""
        with self._thread_lock:
            if self.lock_fd is not None:
                return True  # Already locked by this instance

            start_time = time.time()
            while time.time() - start_time < self.timeout:
                try:
                    self.lock_fd = os.open(
                        str(self.lock_file_path),
                        os.O_CREAT | os.O_EXCL | os.O_RDWR
                    )
                    return True
                except FileExistsError:
                    time.sleep(0.05)
                except OSError as e:
                    raise StorageError(f"Failed to acquire lock: {e}")

            raise LockTimeoutError(f"Failed to acquire lock within {self.timeout} seconds")

    def release(self) -> None:
        """Release file lock."""
        with self._thread_lock:
            if self.lock_fd is None:
                return
            try:
                os.close(self.lock_fd)
                os.unlink(self.lock_file_path)
            finally:
                self.lock_fd = None

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()


class JSONStorage:
    """JSON document storage with atomic writes and backups."""

    def __init__(
        self,
        file_path: Union[str, Path],
        backup_count: int = 5,
        lock_timeout: float = 10.0
    ):
        self.logger = logging.getLogger("registry.storage")
        self.file_path = Path(file_path)
        self.backup_count = backup_count
        self.lock_timeout = lock_timeout
        self._lock = FileLock(self.file_path, timeout=lock_timeout)

        self.file_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def backup_dir(self) -> Path:
        return self.file_path.parent / 'backups'

    def _calculate_checksum(self, data: bytes) -> str:
        """Calculate SHA-256 checksum of data."""
        return hashlib.sha256(data).hexdigest()

    def _write_file(self, data: Dict[str, Any]) -> bytes:
        """Write data to file atomically and return the written bytes."""
        json_data = json.dumps(data, indent=2, default=str).encode('utf-8')
        temp_file = self.file_path.with_suffix(self.file_path.suffix + '.tmp')

        try:
            with open(temp_file, 'wb') as f:
                f.write(json_data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_file, self.file_path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise StorageError(f"Failed to write file: {e}")

        return json_data

    def _create_backup(self) -> None:
        """Create timestamped backup of current file."""
        if not self.file_path.exists() or self.backup_count <= 0:
            return

        timestamp = datetime.utcnow().strftime('%Y%m%d_%H%M%S_%f')
        backup_path = self.backup_dir / f"{self.file_path.stem}_{timestamp}{self.file_path.suffix}"
        backup_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(self.file_path, backup_path)

        self._cleanup_old_backups()

    def _cleanup_old_backups(self) -> None:
        """Remove old backup files beyond backup_count."""
        for backup_file in self.list_backups()[self.backup_count:]:
            try:
                backup_file.unlink()
            except OSError as e:
                self.logger.warning(f"Failed to remove old backup {backup_file}: {e}")

    @contextmanager
    def locked(self):
        """Hold the storage lock for a read-modify-write sequence."""
        with self._lock:
            yield

    def exists(self) -> bool:
        return self.file_path.exists()

    def read(self) -> Dict[str, Any]:
        """Read and deserialize data from storage."""
        if not self.file_path.exists():
            return {}

        try:
            data = self.file_path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read storage: {e}")

        if not data:
            return {}

        try:
            return json.loads(data.decode('utf-8'))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise IntegrityError(f"Invalid JSON data in {self.file_path}: {e}")

    def write(self, data: Dict[str, Any], create_backup: bool = True) -> str:
        """Write data atomically. Returns the SHA-256 checksum of the written file."""
        if create_backup:
            self._create_backup()
        return self._calculate_checksum(self._write_file(data))

    def verify(self, expected_checksum: str) -> bool:
        """Verify file contents against a checksum returned by write()."""
        if not self.file_path.exists():
            return False
        return self._calculate_checksum(self.file_path.read_bytes()) == expected_checksum

    def list_backups(self) -> List[Path]:
        """List backup files, newest first."""
        if not self.backup_dir.exists():
            return []

        pattern = f"{self.file_path.stem}_*{self.file_path.suffix}"
        return sorted(self.backup_dir.glob(pattern), key=lambda p: p.name, reverse=True)


class LedgerStorage:
    """High-level ledger snapshot storage."""

    FILE_NAME = "ledger.json"

    def __init__(
        self,
        storage_dir: Union[str, Path] = "ledger_data",
        backup_count: int = 5,
        lock_timeout: float = 10.0
    ):
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

        self.json_storage = JSONStorage(
            self.storage_dir / self.FILE_NAME,
            backup_count=backup_count,
            lock_timeout=lock_timeout
        )

    def exists(self) -> bool:
        return self.json_storage.exists()

    def locked(self):
        return self.json_storage.locked()

    def load_snapshot(self) -> LedgerSnapshot:
        """Load the ledger snapshot from storage."""
        data = self.json_storage.read()
        if not data:
            raise LedgerNotInitializedError(
                f"No ledger found in {self.storage_dir}; run 'issuance init' first"
            )

        try:
            return LedgerSnapshot.model_validate(data)
        except ValidationError as e:
            raise IntegrityError(f"Stored ledger snapshot is invalid: {e}")

    def save_snapshot(self, snapshot: LedgerSnapshot) -> str:
        """Save the ledger snapshot. Returns the file checksum."""
        snapshot.update_timestamp()
        return self.json_storage.write(snapshot.model_dump(mode='json'))

    def list_backups(self) -> List[str]:
        return [p.name for p in self.json_storage.list_backups()]

    def get_storage_info(self) -> Dict[str, Any]:
        path = self.json_storage.file_path
        return {
            'storage_dir': str(self.storage_dir),
            'file': str(path),
            'size_bytes': path.stat().st_size if path.exists() else 0,
            'backups': len(self.json_storage.list_backups()),
        }
