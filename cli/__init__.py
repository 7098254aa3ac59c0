"""
HREF CLI - replay captured text-editing sessions

Commands:
- href replay - Reconstruct text state at a point in time
- href events list/validate - Document inspection
- href play - Live terminal playback
"""

__version__ = "0.1.0"
