"""JSON document store backing the vehicle catalog and the booking ledger."""

import copy
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

from carrental.errors import DuplicateKeyError, NotFoundError

logger = logging.getLogger(__name__)

COLLECTIONS = ("vehicles", "bookings")

# Secondary keys that must stay unique within their collection
UNIQUE_KEYS = {
    "vehicles": ("license_plate",),
    "bookings": ("booking_code",),
}


def empty_database() -> Dict[str, List[Dict[str, Any]]]:
    return {name: [] for name in COLLECTIONS}


class Transaction:
    """Writes staged by a store transaction, applied together on commit."""

    def __init__(self):
        self.operations: List[Tuple[str, str, Any]] = []

    def insert(self, collection: str, document: Dict[str, Any]) -> None:
        self.operations.append(("insert", collection, copy.deepcopy(document)))

    def update(self, collection: str, document: Dict[str, Any]) -> None:
        self.operations.append(("update", collection, copy.deepcopy(document)))

    def delete(self, collection: str, document_id: str) -> None:
        self.operations.append(("delete", collection, document_id))


class JsonStore:
    """
    Keyed document storage persisted to a single JSON file.

    Documents live in named collections and are keyed by their "id".
    Every write goes through a transaction: staged writes are validated
    and applied under the commit lock, so readers never see half of a
    transaction and a failed commit leaves nothing behind.

    Args:
        path: JSON file to persist to. None keeps the data in memory.
    """

    def __init__(self, path: Optional[str] = None):
        self.path = path
        self._commit_lock = threading.RLock()
        self._data = self._load()

    def _load(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        raw = empty_database()

        if self.path:
            if os.path.exists(self.path):
                with open(self.path, 'r') as f:
                    raw.update(json.load(f))
            else:
                logger.info(f"Database file not found, creating {self.path}")
                self._write_file(raw)

        return {
            name: {document["id"]: document for document in raw.get(name, [])}
            for name in COLLECTIONS
        }

    def _write_file(self, raw: Dict[str, List[Dict[str, Any]]]) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, 'w') as f:
                json.dump(raw, f, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        if name not in self._data:
            raise KeyError(f"Collection '{name}' not found")
        return self._data[name]

    # Reads

    def all(self, collection: str) -> List[Dict[str, Any]]:
        """Return copies of every document in a collection."""
        with self._commit_lock:
            return copy.deepcopy(list(self._collection(collection).values()))

    def get(self, collection: str, document_id: str) -> Optional[Dict[str, Any]]:
        with self._commit_lock:
            document = self._collection(collection).get(document_id)
            return copy.deepcopy(document) if document is not None else None

    def find(self, collection: str, predicate: Callable[[Dict[str, Any]], bool]) -> List[Dict[str, Any]]:
        with self._commit_lock:
            return [
                copy.deepcopy(document)
                for document in self._collection(collection).values()
                if predicate(document)
            ]

    # Writes

    @contextmanager
    def transaction(self) -> Iterator[Transaction]:
        """
        Stage writes and commit them all-or-nothing.

        An exception raised inside the block discards the staged writes.

        Raises:
            DuplicateKeyError: If the commit would break a unique key
            NotFoundError: If an update or delete targets a missing document
        """
        txn = Transaction()
        yield txn
        self._commit(txn.operations)

    def insert(self, collection: str, document: Dict[str, Any]) -> None:
        with self.transaction() as txn:
            txn.insert(collection, document)

    def update(self, collection: str, document: Dict[str, Any]) -> None:
        with self.transaction() as txn:
            txn.update(collection, document)

    def delete(self, collection: str, document_id: str) -> None:
        with self.transaction() as txn:
            txn.delete(collection, document_id)

    def _commit(self, operations: List[Tuple[str, str, Any]]) -> None:
        if not operations:
            return

        with self._commit_lock:
            staged = {name: dict(documents) for name, documents in self._data.items()}
            touched = set()

            for action, collection, payload in operations:
                if collection not in staged:
                    raise KeyError(f"Collection '{collection}' not found")
                documents = staged[collection]
                touched.add(collection)

                if action == "insert":
                    if payload["id"] in documents:
                        raise DuplicateKeyError(f"Document with ID '{payload['id']}' already exists in '{collection}'")
                    documents[payload["id"]] = payload
                elif action == "update":
                    if payload["id"] not in documents:
                        raise NotFoundError(f"Item with ID '{payload['id']}' not found in '{collection}'")
                    documents[payload["id"]] = payload
                else:
                    if payload not in documents:
                        raise NotFoundError(f"Item with ID '{payload}' not found in '{collection}'")
                    del documents[payload]

            for collection in touched:
                self._check_unique(collection, staged[collection])

            if self.path:
                self._write_file({name: list(documents.values()) for name, documents in staged.items()})

            self._data = staged

    @staticmethod
    def _check_unique(collection: str, documents: Dict[str, Dict[str, Any]]) -> None:
        for key in UNIQUE_KEYS.get(collection, ()):
            seen = set()
            for document in documents.values():
                value = document.get(key)
                if value is None:
                    continue
                if value in seen:
                    raise DuplicateKeyError(f"{key} '{value}' already exists")
                seen.add(value)
