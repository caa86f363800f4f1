"""
Fuel Tracker.

Single-user fuel log: records fill-ups and derives mileage and cost per
distance between consecutive fills in odometer order.
"""

__version__ = "0.1.0"
