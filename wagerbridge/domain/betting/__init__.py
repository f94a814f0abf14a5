"""
Betting bounded context: domain layer.

This module contains all domain logic for the betting context:
- Odds value objects and conversions
- The Bet aggregate and its settlement lifecycle
- Domain events and errors
- Repository and event publisher ports
"""
