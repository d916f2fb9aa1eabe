"""Document store for stage outputs.

Latest-value-per-user Firestore documents, one collection per stage.
"""

from brainrelay.store.document_store import StageStore

__all__ = ["StageStore"]
