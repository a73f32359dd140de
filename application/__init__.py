"""
Application layer for the coaching program API.

This package contains:
- ports/: Repository interfaces (what the services need)
- exceptions.py: Error taxonomy shared by services and adapters
"""
