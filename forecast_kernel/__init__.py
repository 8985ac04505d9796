"""
Forecast Kernel

Pure foundation for the billing forecast engine:
- UTC-normalized calendar date arithmetic
- Injectable clock
- Immutable contract and transaction snapshots
- Parsed billing schedules
- Typed exceptions and structured logging
"""

__version__ = "0.1.0"
