"""Declarative base, timestamp mixins and constraint naming."""

import pytest

from wizeprompt.database.base import Base, CreatedAtMixin, TimestampMixin
from wizeprompt.models import Conversation, Message, Tag, User


class TestTimestampMixins:

    @pytest.mark.parametrize("model", [User, Conversation])
    def test_mutable_rows_track_updates(self, model):
        assert issubclass(model, TimestampMixin)
        assert model.__table__.c.updated_at.onupdate is not None
        assert model.__table__.c.created_at.server_default is not None

    def test_messages_are_append_only(self):
        assert issubclass(Message, CreatedAtMixin)
        assert not issubclass(Message, TimestampMixin)
        assert "updated_at" not in Message.__table__.c
        assert "created_at" in Message.__table__.c

    def test_tags_carry_no_timestamps(self):
        assert "created_at" not in Tag.__table__.c


def test_repr_before_flush():
    assert repr(Tag(name="draft")) == "<Tag id=None>"


class TestNamingConvention:

    def test_foreign_keys_are_named_after_table_column_and_target(self):
        names = {str(fk.name) for fk in Message.__table__.foreign_key_constraints}

        assert names == {"fk_messages_conversation_id_conversations"}

    def test_metadata_is_shared(self):
        assert Conversation.metadata is Base.metadata
        assert "conversation_tags" in Base.metadata.tables


@pytest.mark.asyncio
class TestRepr:

    async def test_repr_shows_class_and_id(self, created_user):
        assert repr(created_user) == f"<User id={created_user.id}>"

    async def test_created_at_filled_by_database(self, created_user):
        assert created_user.created_at is not None
        assert created_user.updated_at is not None
