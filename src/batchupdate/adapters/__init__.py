"""Adapters implementing the batch update ports."""
