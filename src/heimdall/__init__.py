"""
heimdall

Visual safety monitoring backend: webcam frames in, helmet compliance out.
"""

__version__ = "1.0.0"
