"""Gig marketplace order lifecycle API."""
