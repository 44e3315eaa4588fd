"""
Petty Cash Manager - Source Package

A small-office ledger for cash advances: who borrowed how much, what has
come back, and how much of the float is still out.

DESIGN PRINCIPLES:
1. Status is derived, never stored
2. Fail early, fail visibly
3. No silent corrections
4. Every change must be auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Petty Cash Manager Team"
