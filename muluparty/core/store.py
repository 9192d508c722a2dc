"""Path-addressed access to the remote document store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from muluparty.errors import TransportError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


class RemoteStore:
    """Reads and writes documents by slash-separated path.

    Paths alternate collection and document names, e.g. ``allTeams/abc``.
    Every call is an independent remote operation; nothing here groups
    writes into a transaction. Failures of the underlying client surface as
    ``TransportError`` carrying the original message.
    """

    def __init__(self, client: Client) -> None:
        """Wrap a Firestore client."""
        self._client = client

    def _reference(self, path: str) -> Any:
        parts = [part for part in path.split("/") if part]
        if not parts:
            raise ValueError("Empty store path.")
        ref: Any = self._client
        for index, part in enumerate(parts):
            ref = ref.collection(part) if index % 2 == 0 else ref.document(part)
        return ref

    def get(self, path: str) -> dict[str, Any] | None:
        """Return the document at ``path``, or None if it does not exist."""
        try:
            snapshot = cast("DocumentSnapshot", self._reference(path).get())
        except Exception as e:
            raise TransportError(
                f"Unable to retrieve the specified data. ({e})"
            ) from e
        if not snapshot.exists:
            return None
        return snapshot.to_dict() or {}

    def set(self, path: str, value: dict[str, Any]) -> None:
        """Replace the document at ``path``."""
        try:
            self._reference(path).set(value)
        except Exception as e:
            raise TransportError(f"Unable to write the specified data. ({e})") from e

    def update(self, path: str, fields: dict[str, Any]) -> None:
        """Replace the given top-level fields of an existing document."""
        try:
            self._reference(path).update(fields)
        except Exception as e:
            raise TransportError(f"Unable to write the specified data. ({e})") from e

    def delete(self, path: str) -> None:
        """Delete the document at ``path``."""
        try:
            self._reference(path).delete()
        except Exception as e:
            raise TransportError(
                f"Unable to delete the specified data. ({e})"
            ) from e

    def generate_key(self, parent_path: str) -> str:
        """Return a new unique document id under the collection ``parent_path``."""
        try:
            key = self._reference(parent_path).document().id
        except Exception as e:
            raise TransportError(f"Unable to create key in database. ({e})") from e
        if not key:
            raise TransportError("Unable to create key in database.")
        return str(key)

    def children(self, parent_path: str) -> dict[str, dict[str, Any]]:
        """Return every existing document in a collection, keyed by id."""
        try:
            docs = list(self._reference(parent_path).stream())
        except Exception as e:
            raise TransportError(
                f"Unable to retrieve the specified data. ({e})"
            ) from e
        return {doc.id: doc.to_dict() or {} for doc in docs if doc.exists}

    def find(self, parent_path: str, field: str, value: Any) -> list[str]:
        """Return the ids of documents whose ``field`` equals ``value``."""
        try:
            query = self._reference(parent_path).where(
                filter=firestore.FieldFilter(field, "==", value)
            )
            docs = list(query.stream())
        except Exception as e:
            raise TransportError(
                f"Unable to retrieve the specified data. ({e})"
            ) from e
        ids = [doc.id for doc in docs if doc.exists]
        logging.debug(f"Found {len(ids)} document(s) in {parent_path} by {field}.")
        return ids


def get_store(client: Client | None = None) -> RemoteStore:
    """Return a store bound to the given client or the default Firestore app."""
    if client is None:
        client = firestore.client()
    return RemoteStore(client)
