from .loader import RelationshipLoader, load_relationships

__all__ = ["RelationshipLoader", "load_relationships"]
