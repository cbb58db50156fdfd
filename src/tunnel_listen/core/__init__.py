"""Core listen configuration loader.

This package contains the components that turn configuration text into
listen entries:
- Option tokenizing and checked field access
- Transport protocol parsing
- Directive matching and per-entry validation
- Legacy default resolution
- Exception handling

The core package holds all the loading logic, while keeping it separate
from the command-line interface.
"""
