"""
clinic_schedule - Interval algebra for booking visits into on-call time.
"""

__version__ = "0.1.0"
