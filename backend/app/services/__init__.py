"""
Singers API — Services Package
================================

What:  Database operations for the routes, one awaited call per method.

Services:
    - singer_service.py:     Embedded and relational singer operations
    - instrument_service.py: Instruments collection (relational join source)
    - keys.py:               Path id → native primary key conversion
"""
