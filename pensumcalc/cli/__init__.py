"""Pensum Calc CLI."""
