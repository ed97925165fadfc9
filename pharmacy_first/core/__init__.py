"""
Core pathway and scoring logic.
"""
