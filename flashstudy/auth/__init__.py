"""
Auth module - bearer token verification for identities issued by the identity provider.
"""

from flashstudy.auth.schemas import AuthenticatedUser, PlanFeature

__all__ = ["AuthenticatedUser", "PlanFeature"]
