"""Laundry pickup ordering API."""
