"""Role and ownership checks applied before reading or mutating posts."""
from __future__ import annotations

from travelblog.core.errors import Forbidden
from travelblog.models import BlogPost
from travelblog.services.auth import SessionClaims


def is_author(claims: SessionClaims, post: BlogPost) -> bool:
    return claims.subject.lower() == post.author_id.lower()


def can_view(claims: SessionClaims, post: BlogPost) -> bool:
    return post.is_published or is_author(claims, post)


def can_modify(claims: SessionClaims, post: BlogPost) -> bool:
    return claims.is_contributor and is_author(claims, post)


def require_contributor(claims: SessionClaims) -> None:
    if not claims.is_contributor:
        raise Forbidden("Only contributors can manage posts")
