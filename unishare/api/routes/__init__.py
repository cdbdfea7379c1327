from . import documents, essay, internal, lectures, users

__all__ = ["documents", "essay", "internal", "lectures", "users"]
