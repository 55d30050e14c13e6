"""Flat-file persistence for simpletodo."""

from simpletodo.storage.data_service import DataService

__all__ = ["DataService"]
