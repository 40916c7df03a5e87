"""
Postboard - user accounts, session-backed authentication, password reset
and simple posts over FastAPI and SQLModel.
"""

__version__ = "0.1.0"
