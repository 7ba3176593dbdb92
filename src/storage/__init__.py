"""Durable storage for the completed focus-cycle counter."""

from .cycle_store import FileCycleStore, InMemoryCycleStore, default_cycle_file

__all__ = ["FileCycleStore", "InMemoryCycleStore", "default_cycle_file"]
