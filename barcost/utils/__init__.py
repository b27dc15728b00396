"""Utility modules for the Bar Costing application."""
