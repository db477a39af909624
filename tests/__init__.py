"""
Test suite for enstate.

Focus areas:
- The machine contract (illegal edges are no-ops)
- Generator adapters
- Structural and sequencing combinators
- Driver, configuration and CLI
"""
