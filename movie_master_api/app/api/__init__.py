"""
API package containing versioned routes.

Version 1 lives in ``v1`` and exposes a single ``router`` that the
application mounts under ``/api``.
"""
