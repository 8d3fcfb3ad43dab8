import pytest
from sqlalchemy.exc import IntegrityError

from wizeprompt.exceptions.base import NotFoundError, PersistenceError, RepositoryError
from wizeprompt.exceptions.integrity_classifier import (
    Violation,
    classify_integrity_error,
    resolve_constraint_name,
)
from wizeprompt.exceptions.mapper import db_error_handler
from wizeprompt.models import Conversation, Tag


class FakePgError(Exception):
    def __init__(self, message: str, sqlstate: str, constraint_name: str | None = None):
        super().__init__(message)
        self.sqlstate = sqlstate
        self.constraint_name = constraint_name


def _integrity(orig: Exception) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, orig)


class TestClassifyIntegrityError:

    @pytest.mark.parametrize(
        "message, kind, table, columns",
        [
            ("UNIQUE constraint failed: tags.name", Violation.UNIQUE, "tags", ["name"]),
            ("NOT NULL constraint failed: conversations.title", Violation.NOT_NULL, "conversations", ["title"]),
            (
                'null value in column "title" of relation "conversations" violates not-null constraint',
                Violation.NOT_NULL, "conversations", ["title"],
            ),
            ("FOREIGN KEY constraint failed", Violation.FOREIGN_KEY, None, []),
            ("something odd happened", Violation.UNKNOWN, None, []),
        ],
    )
    def test_message_fallback(self, message, kind, table, columns):
        violation = classify_integrity_error(_integrity(Exception(message)))

        assert violation.kind is kind
        assert violation.table == table
        assert violation.columns == columns
        assert violation.constraint is None

    def test_postgres_detail_key_columns(self):
        violation = classify_integrity_error(
            _integrity(Exception("duplicate key value\nDETAIL:  Key (user_id, title)=(1, x) already exists."))
        )

        assert violation.kind is Violation.UNIQUE
        assert violation.columns == ["user_id", "title"]

    def test_sqlstate_and_constraint_name_identify_missing_user(self):
        orig = FakePgError("insert or update violates ...", "23503", constraint_name="fk_conversations_user_id_users")

        violation = classify_integrity_error(_integrity(orig))

        assert violation.kind is Violation.FOREIGN_KEY
        assert violation.table == "conversations"
        assert violation.columns == ["user_id"]
        assert violation.referenced_entity == "User"

    def test_tag_link_to_deleted_tag(self):
        orig = FakePgError("fk", "23503", constraint_name="fk_conversation_tags_tag_id_tags")

        violation = classify_integrity_error(_integrity(orig))

        assert violation.table == "conversation_tags"
        assert violation.referenced_entity == "Tag"

    def test_referenced_entity_only_for_foreign_keys(self):
        orig = FakePgError("dup", "23505", constraint_name="ix_users_username")

        violation = classify_integrity_error(_integrity(orig))

        assert violation.kind is Violation.UNIQUE
        assert (violation.table, violation.columns) == ("users", ["username"])
        assert violation.referenced_entity is None


class TestResolveConstraintName:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("fk_conversations_model_id_models", ("conversations", ["model_id"])),
            ("fk_messages_conversation_id_conversations", ("messages", ["conversation_id"])),
            ("uq_tags_name", ("tags", ["name"])),
            ("pk_conversations", (None, [])),
            ("some_other_constraint", (None, [])),
        ],
    )
    def test_resolve(self, name, expected):
        assert resolve_constraint_name(name) == expected

    def test_names_come_from_metadata_convention(self):
        fk_names = {str(fk.name) for fk in Conversation.__table__.foreign_key_constraints}

        assert "fk_conversations_user_id_users" in fk_names
        assert "fk_conversations_model_id_models" in fk_names


@pytest.mark.asyncio
class TestDbErrorHandler:

    async def test_integrity_error_becomes_persistence_error_with_raw_text(self, db_session):
        with pytest.raises(PersistenceError) as exc_info:
            async with db_error_handler(db_session, "Tag"):
                db_session.add(Tag())
                await db_session.flush()

        assert exc_info.value.message == "NOT NULL constraint failed: tags.name"
        assert str(exc_info.value) == "NOT NULL constraint failed: tags.name"
        assert exc_info.value.http_status() == 500
        assert exc_info.value.fields == ["name"]
        assert exc_info.value.violation.kind is Violation.NOT_NULL
        assert exc_info.value.violation.table == "tags"

    async def test_repository_errors_pass_through(self, db_session):
        with pytest.raises(NotFoundError):
            async with db_error_handler(db_session, "Tag"):
                raise NotFoundError("Tag not found")

    async def test_unexpected_errors_are_wrapped(self, db_session):
        with pytest.raises(PersistenceError, match="boom"):
            async with db_error_handler(db_session):
                raise RuntimeError("boom")

    async def test_session_usable_after_rollback(self, db_session, tag_repository):
        with pytest.raises(PersistenceError):
            async with db_error_handler(db_session, "Tag"):
                db_session.add(Tag())
                await db_session.flush()

        tag = await tag_repository.create_tag("after-rollback")
        assert tag.id is not None


class TestRepositoryErrorPayload:

    def test_payload_and_status(self):
        err = RepositoryError("Bad title", fields=["title"], error_code="invalid_input", constraint="ck_title")

        assert err.to_payload() == {"detail": "Bad title", "code": "invalid_input", "fields": ["title"]}
        assert err.http_status() == 400
        assert "constraint: ck_title" in str(err)

    def test_unknown_code_defaults_to_400(self):
        assert RepositoryError("x", error_code="weird").http_status() == 400
        assert RepositoryError("x").http_status() == 400
