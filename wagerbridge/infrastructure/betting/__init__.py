"""
Bet repository implementations.
"""
