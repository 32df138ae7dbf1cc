"""
Vector database boundary.

Exports:
  - MongoVectorStore: Message embedding store on MongoDB Atlas
  - FixedDimensionEmbeddings: Cohere embeddings with dimension checks
  - get_vector_store(): Memoized store factory
"""

from stacks.boundary.vdb.embeddings import FixedDimensionEmbeddings
from stacks.boundary.vdb.mongo_vector_store import MongoVectorStore
from stacks.boundary.vdb.vector_schemas import PatternMatch, SemanticMatch
from stacks.boundary.vdb.vector_store_factory import close_vector_store, get_vector_store

__all__ = [
    "FixedDimensionEmbeddings",
    "MongoVectorStore",
    "PatternMatch",
    "SemanticMatch",
    "close_vector_store",
    "get_vector_store",
]
