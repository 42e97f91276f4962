# src/discusspedia/services/__init__.py
"""Business logic services for the Discusspedia application."""
