"""Hostel restaurant ordering service."""
