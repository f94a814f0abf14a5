"""
Fantasy402 integration context: domain layer.

External entities (accounts, agents, bets, sport events), the odds-format
strategies used for payout math, and the gateway port.
"""
