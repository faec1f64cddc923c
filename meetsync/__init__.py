"""
MeetSync - find the meeting time that works for everyone.
"""

__version__ = "0.1.0"
