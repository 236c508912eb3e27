"""Manage PHP directives and WordPress constants of a WordPress install."""
