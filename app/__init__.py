"""
Sudoku Puzzle Engine - Console Application Package
"""
