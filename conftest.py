"""
Pytest configuration.

Registers hypothesis profiles; select one with --hypothesis-profile.
"""

from hypothesis import settings

settings.register_profile("ci", max_examples=300, deadline=None)
settings.register_profile("dev", max_examples=25, deadline=None)
