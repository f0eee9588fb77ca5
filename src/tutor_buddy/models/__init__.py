from .tables import StoreTables

__all__ = ["StoreTables"]
