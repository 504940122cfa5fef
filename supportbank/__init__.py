"""
SupportBank - Source Package

A personal-ledger reconciliation tool that imports transaction files
in CSV, JSON or XML, keeps running balances per account, and exports
the accumulated ledger back to any of those formats.

DESIGN PRINCIPLES:
1. One canonical record shape behind every file format
2. Repair what can be repaired, and say so
3. A failed import never touches the ledger
4. Every step must be auditable
5. File formats are swappable
"""

__version__ = "1.0.0"
__author__ = "SupportBank Team"
