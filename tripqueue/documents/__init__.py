"""Durable itinerary document storage."""

from .base import UNSET, DocumentStatus, DocumentStore, ItineraryDocument
from .firestore import FirestoreDocumentStore
from .memory import InMemoryDocumentStore

__all__ = [
    "DocumentStatus",
    "DocumentStore",
    "ItineraryDocument",
    "UNSET",
    "InMemoryDocumentStore",
    "FirestoreDocumentStore",
]
