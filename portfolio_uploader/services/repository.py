"""
Photo Repository - Single Responsibility: persist photo records in Firestore.

Implements Repository Pattern for data access. One document per photo in a
single collection, keyed by its identifier.
"""
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.api_core.exceptions import GoogleAPIError
from google.cloud.firestore import AsyncClient, Query
from google.cloud.firestore_v1.base_query import FieldFilter

from ..exceptions import MetadataStoreError
from ..identifiers import seed_from_identifier
from ..models import PhotoRecord
from ..protocols import IMetadataStore

logger = logging.getLogger(__name__)

BATCH_LIMIT = 500  # Firestore maximum writes per batch


def open_firestore_client(credentials_file: Path) -> AsyncClient:
    """
    Initialize the default Firebase app from a service account file.

    Raises:
        MetadataStoreError: the credentials file is missing or invalid
    """
    try:
        app = firebase_admin.get_app()
    except ValueError:
        try:
            cert = credentials.Certificate(str(credentials_file))
        except (OSError, ValueError) as exc:
            raise MetadataStoreError(f"invalid Firebase credentials {credentials_file}: {exc}") from exc
        app = firebase_admin.initialize_app(cert)
    return firestore_async.client(app)


class PhotoRepository(IMetadataStore):
    """
    Repository for photo documents stored in one Firestore collection.

    Backend errors surface as MetadataStoreError; an unreachable or
    misconfigured store is never read as an empty one.
    """

    def __init__(self, client: AsyncClient, collection: str = "photos"):
        """
        Initialize repository.

        Args:
            client: Firestore async client
            collection: Collection holding the documents
        """
        self._client = client
        self._collection = collection

    def _ref(self):
        return self._client.collection(self._collection)

    async def _fetch(self, query, action: str) -> List[Any]:
        try:
            return [snapshot async for snapshot in query.stream()]
        except GoogleAPIError as exc:
            raise MetadataStoreError(f"{action} on {self._collection} failed: {exc}") from exc

    async def hash_exists(self, content_hash: str) -> bool:
        query = self._ref().where(filter=FieldFilter("hash", "==", content_hash)).limit(1)
        return bool(await self._fetch(query, "hash lookup"))

    async def latest_identifier(self) -> Optional[str]:
        """Lexicographically maximal title in the collection."""
        query = self._ref().order_by("title", direction=Query.DESCENDING).limit(1)
        snapshots = await self._fetch(query, "latest title lookup")
        if not snapshots:
            return None
        return (snapshots[0].to_dict() or {}).get("title")

    async def next_id_seed(self, prefix: str) -> int:
        latest = await self.latest_identifier()
        seed = seed_from_identifier(latest, prefix)
        logger.debug("Latest identifier %s -> seed %d", latest, seed)
        return seed

    async def get(self, identifier: str) -> Optional[PhotoRecord]:
        try:
            snapshot = await self._ref().document(identifier).get()
        except GoogleAPIError as exc:
            raise MetadataStoreError(f"get {identifier} failed: {exc}") from exc
        if not snapshot.exists:
            return None
        doc: Dict[str, Any] = snapshot.to_dict() or {}
        doc.setdefault("title", identifier)
        return PhotoRecord.from_document(doc)

    async def put(self, identifier: str, record: PhotoRecord) -> None:
        try:
            await self._ref().document(identifier).set(record.to_document())
        except GoogleAPIError as exc:
            raise MetadataStoreError(f"write {identifier} failed: {exc}") from exc

    async def set_flag(self, identifier: str, field: str, value: bool) -> None:
        try:
            await self._ref().document(identifier).update({field: value})
        except GoogleAPIError as exc:
            raise MetadataStoreError(f"update {identifier} failed: {exc}") from exc

    async def list_flagged(self, field: str) -> List[PhotoRecord]:
        query = self._ref().where(filter=FieldFilter(field, "==", True))
        snapshots = await self._fetch(query, f"{field} lookup")
        return [PhotoRecord.from_document(s.to_dict() or {"title": s.id}) for s in snapshots]

    async def delete_all(self) -> int:
        snapshots = await self._fetch(self._ref(), "listing")
        for start in range(0, len(snapshots), BATCH_LIMIT):
            batch = self._client.batch()
            for snapshot in snapshots[start:start + BATCH_LIMIT]:
                batch.delete(snapshot.reference)
            try:
                await batch.commit()
            except GoogleAPIError as exc:
                raise MetadataStoreError(f"delete on {self._collection} failed: {exc}") from exc
        logger.debug("Deleted %d documents from %s", len(snapshots), self._collection)
        return len(snapshots)
