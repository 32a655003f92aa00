"""
trackboard - Project metrics and weekly time tracking for task-tracker exports
"""

__version__ = "0.3.0"
