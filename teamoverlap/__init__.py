"""
teamoverlap - find meeting windows across a distributed team's working hours.
"""

__version__ = "0.1.0"
