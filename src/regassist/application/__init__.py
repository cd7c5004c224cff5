"""
application - Use-case services and DTOs.

Depends on domain/ only. Talks to the outside world through domain ports.
"""
