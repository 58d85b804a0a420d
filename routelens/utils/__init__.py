from .edit_distance import levenshtein

__all__ = ["levenshtein"]
