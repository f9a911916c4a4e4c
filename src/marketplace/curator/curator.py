"""Curator aggregate — a seller account that lists products and fulfills orders."""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, String

from marketplace.curator.events import CuratorRegistered
from marketplace.domain import marketplace
from marketplace.shared.errors import ForbiddenError, NotFoundError


@marketplace.aggregate
class Curator:
    user_id = Identifier(required=True)
    store_name = String(required=True, max_length=120)
    slug = String(required=True, max_length=120)
    is_active = Boolean(default=True)
    created_at = DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        if self.slug and not re.match(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", self.slug):
            raise ValidationError({"slug": ["Slug must contain only lowercase alphanumeric characters and hyphens"]})

    @classmethod
    def register(cls, user_id, store_name, slug):
        now = datetime.now(UTC)
        curator = cls(user_id=user_id, store_name=store_name, slug=slug, created_at=now)
        curator.raise_(
            CuratorRegistered(
                curator_id=str(curator.id),
                user_id=str(user_id),
                store_name=store_name,
                slug=slug,
                registered_at=now,
            )
        )
        return curator


@marketplace.repository(part_of=Curator)
class CuratorRepository:
    def find_by_user(self, user_id) -> Curator | None:
        results = self._dao.query.filter(user_id=str(user_id)).all().items
        return results[0] if results else None

    def find_by_slug(self, slug) -> Curator | None:
        results = self._dao.query.filter(slug=slug).all().items
        return results[0] if results else None

    def for_user(self, user_id) -> Curator:
        """Return the curator profile owned by ``user_id`` or raise not-found."""
        curator = self.find_by_user(user_id)
        if curator is None:
            raise NotFoundError("Curator profile not found")
        return curator

    def acting_curator(self, user_id, message="Only curators can perform this action") -> Curator:
        """Like ``for_user`` but reports a missing profile as forbidden."""
        curator = self.find_by_user(user_id)
        if curator is None:
            raise ForbiddenError(message)
        return curator
