"""
FinTrack - Source Package

A personal finance tracker for income, expenses and peer-to-peer debts.

DESIGN PRINCIPLES:
1. Derived figures are always recomputed, never cached
2. Invalid input is rejected at entry, never downstream
3. Storage and AI failures degrade a feature, never crash the app
4. The AI model only advises; it never computes financial figures
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "FinTrack Team"
