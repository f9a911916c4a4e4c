"""Curator registration — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.curator.curator import Curator
from marketplace.domain import logger, marketplace


@marketplace.command(part_of="Curator")
class RegisterCurator:
    user_id = Identifier(required=True)
    store_name = String(required=True, max_length=120)
    slug = String(required=True, max_length=120)


@marketplace.command_handler(part_of=Curator)
class RegisterCuratorHandler:
    @handle(RegisterCurator)
    def register_curator(self, command):
        repo = current_domain.repository_for(Curator)
        if repo.find_by_user(command.user_id) is not None:
            raise ValidationError({"user_id": ["User already has a curator profile"]})
        if repo.find_by_slug(command.slug) is not None:
            raise ValidationError({"slug": [f"Slug '{command.slug}' is already taken"]})

        curator = Curator.register(
            user_id=command.user_id,
            store_name=command.store_name,
            slug=command.slug,
        )
        repo.add(curator)
        logger.info("curator.registered", curator_id=str(curator.id), user_id=str(command.user_id))
        return str(curator.id)
