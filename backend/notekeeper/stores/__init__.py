"""
NoteKeeper Backend: Stores
===========================

What:  Persistence layer. Each store owns one table and wraps the
       request's AsyncSession.

Store Inventory:
    - NoteStore: notes keyed by UUID, listed in insertion order
    - UserStore: users keyed by unique username

Driver and connection failures leave a store as StorageUnavailableError;
nothing below the service layer returns HTTP concerns.
"""

from notekeeper.stores.note_store import NoteStore
from notekeeper.stores.user_store import UserStore

__all__ = ["NoteStore", "UserStore"]
