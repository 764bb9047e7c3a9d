"""Subscriber registry.

``validate_url`` checks and normalizes candidate URLs; ``RegistryManager``
enforces that no two live endpoints share a normalized URL.
"""
