"""Cookbook club: membership, meetups, recipes and reminder notifications for a single club."""

__version__ = "0.3.0"
