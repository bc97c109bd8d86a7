"""
FundLedger - Source Package

Record-keeping core for a shared friends fund: bank transactions,
mutual-fund contributions, balances and per-bank statements.

DESIGN PRINCIPLES:
1. One predicate, one sign mapping, used by every code path
2. Storage is a collaborator behind an interface
3. Fail loudly, never substitute placeholder data
4. Money is Decimal, never float
"""

__version__ = "1.0.0"
__author__ = "FundLedger Team"
