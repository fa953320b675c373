"""Persistence for the car rental application."""
from carrental.storage.json_store import JsonStore, Transaction

__all__ = ['JsonStore', 'Transaction']
