"""
Product Provenance & Authenticity Registry

Authoritative registry of physical products, their chain-of-custody events
and authenticity verifications, kept in memory and persisted across restarts.
"""

__version__ = "1.0.0"
__author__ = "Provenance Registry Team"
