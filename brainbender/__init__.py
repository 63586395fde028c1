"""Brain Bender Daily: riddle Shorts rendered with ffmpeg and uploaded to YouTube."""

__version__ = "1.0.0"
