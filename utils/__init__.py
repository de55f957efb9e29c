"""
Sudoku Puzzle Engine - Utilities Package
Block geometry and user coordinate helpers. Persistence lives in utils.file_io.
"""
from .block_geometry import block_origin, block_cells
from .coords import coordinate_to_string, user_to_cell

__all__ = ['block_origin', 'block_cells', 'coordinate_to_string', 'user_to_cell']
