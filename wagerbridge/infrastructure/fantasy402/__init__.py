"""
Fantasy402 integration: HTTP adapter, wire codec and anti-corruption gateway.
"""
