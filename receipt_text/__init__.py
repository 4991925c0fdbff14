"""Receipt Text Parser.

Turns the plain-text transcript of a photographed receipt into a merchant
name, a transaction date and a total amount using ordered pattern tables
and fallback heuristics.
"""

__version__ = "1.0.0"
