"""
Pharmacy First Pathways

Guided clinical consultations over authored decision trees, with NEWS2
deterioration scoring alongside.
"""
__version__ = "1.0.0"
