from .core import SrsEngine

__all__ = ['SrsEngine']
