"""Token Vesting Ledger.

Cliff-then-linear vesting schedules grouped per issuing account, with a
claim settlement engine that releases vested tokens to beneficiaries.
"""

__version__ = "0.1.0"
