"""
Pan Replay CLI

Commands:
- panreplay timeline - Summarize the compiled timeline of a CSV export
- panreplay seek - Reconstruct the line state at a second or wall time
- panreplay play - Live playback in the terminal
- panreplay version - Show version information
"""

__version__ = "0.1.0"
