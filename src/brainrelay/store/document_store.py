"""Firestore-backed store for pipeline stage outputs.

Each stage writes to its own collection, one document per user, holding only
the latest output:

    {collection}/{user_id} -> {"content": str, "updatedAt": <server timestamp>}

Store failures of any kind never block the pipeline: reads fall back to a
placeholder string and writes are logged and reported as False.

Example:
    store = StageStore(firestore.AsyncClient(project="my-project"))
    await store.save("default_user", "master_files", "...")
    text = await store.get_latest("default_user", "master_files")
"""

import logging

from google.cloud import firestore

from brainrelay.errors import PersistenceError

logger = logging.getLogger(__name__)

NOT_FOUND_PLACEHOLDER = "No previous content available."
ERROR_PLACEHOLDER = "Error fetching content."


class StageStore:
    """Latest-value-per-user document store for stage outputs.

    Args:
        client: Firestore async client. Injected so tests and callers
            control its lifetime and credentials.
    """

    def __init__(self, client: firestore.AsyncClient) -> None:
        self.client = client

    async def get_latest(self, user_id: str, collection: str) -> str:
        """Fetch the most recent content stored for a user.

        Args:
            user_id: Document key
            collection: Stage collection name (e.g. "master_files")

        Returns:
            Stored content, NOT_FOUND_PLACEHOLDER if no document exists, or
            ERROR_PLACEHOLDER if the store could not be read.
        """
        try:
            content = await self._read(user_id, collection)
        except PersistenceError as e:
            logger.error("Error fetching %s for %s: %s", collection, user_id, e)
            return ERROR_PLACEHOLDER

        if content is None:
            return NOT_FOUND_PLACEHOLDER
        return content

    async def save(self, user_id: str, collection: str, content: str) -> bool:
        """Overwrite the user's document in a collection.

        Args:
            user_id: Document key
            collection: Stage collection name
            content: Stage output text

        Returns:
            True if the write succeeded, False if it failed (already logged).
        """
        try:
            await self._write(user_id, collection, content)
        except PersistenceError as e:
            logger.error("Error saving %s for %s: %s", collection, user_id, e)
            return False

        logger.debug("Saved %s for %s (%d chars)", collection, user_id, len(content))
        return True

    async def _read(self, user_id: str, collection: str) -> str | None:
        try:
            snapshot = await self.client.collection(collection).document(user_id).get()
        except Exception as e:
            raise PersistenceError(collection, user_id, f"read failed: {e}") from e

        if not snapshot.exists:
            return None
        data = snapshot.to_dict() or {}
        return data.get("content")

    async def _write(self, user_id: str, collection: str, content: str) -> None:
        try:
            await self.client.collection(collection).document(user_id).set(
                {
                    "content": content,
                    "updatedAt": firestore.SERVER_TIMESTAMP,
                }
            )
        except Exception as e:
            raise PersistenceError(collection, user_id, f"write failed: {e}") from e
