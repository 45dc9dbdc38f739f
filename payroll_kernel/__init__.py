"""
Payroll Kernel

Domain layer of the payroll engine:
- Immutable punch, work-period and anomaly value objects
- Compensation sum type (hourly, salary, contractor, daily rate)
- Cent and hour arithmetic helpers (Decimal only, never float)
- Typed exception hierarchy and structured logging
"""

__version__ = "0.1.0"
