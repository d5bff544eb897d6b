"""
Artemis: Audience Targeting Agent

Resolves free-text audience descriptions into Category → Grouping → Demographic
targeting pathways by searching the addressable audience curation sheet.
"""

__version__ = "0.1.0"
