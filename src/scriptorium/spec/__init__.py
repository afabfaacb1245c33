"""
Spec - Wire models, operation variants, and bundled JSON schemas.
"""
