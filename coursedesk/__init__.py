"""
coursedesk - terminal client for the course backend.

Learners browse courses and read their modules; instructors also create
courses and add modules.
"""

__version__ = "1.0.0"
