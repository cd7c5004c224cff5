"""
regassist - Conversational assistant over Regulations.gov.

Layers (inner to outer): domain, application, agent, infrastructure,
adapters. factory.py is the composition root.
"""

__version__ = "0.1.0"
