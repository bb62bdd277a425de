from .vault import NoteVault

__all__ = ["NoteVault"]
