"""
domain - Value objects, exceptions and ports.

No third-party imports. Everything else depends on this package.
"""
