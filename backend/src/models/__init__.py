# Jersey Catalog API - Models Package
#
# Entity records are plain dicts shaped by the introspected schema; the only
# typed model is the request-scoped actor.
from .actor import ActorContext, ROLE_ADMIN, ROLE_EDITOR, ROLE_CLIENT, ROLES

__all__ = [
    'ActorContext',
    'ROLE_ADMIN',
    'ROLE_EDITOR',
    'ROLE_CLIENT',
    'ROLES',
]
