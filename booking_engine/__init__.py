"""
Interpreter Booking Engine.

Job lifecycle, translator matching and notification decisions for an
interpretation booking marketplace.
"""

__version__ = "0.1.0"
__author__ = "Booking Platform Team"
__description__ = "Interpreter Booking Engine"
