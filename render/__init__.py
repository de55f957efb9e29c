"""
Sudoku Puzzle Engine - Rendering Package
"""
from .board_render import BoardRenderer

__all__ = ['BoardRenderer']
