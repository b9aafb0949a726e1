"""
Canplay - Card Game Action Legality Engine

Decides whether a card's spell or ability may legally be used right now,
given restrictions declared on the ability and the state of the table.
The engine provides:
- Typed restriction sets built from card-script parameters
- A read-only game state model and expression evaluator
- Staged legality checks (zone, timing, activator, aggregate, limits)
- A REST API and CLI for rules tooling
"""

__version__ = "0.1.0"
