"""Semantic product search and retrieval-augmented answers backed by Qdrant."""

__version__ = "0.1.0"