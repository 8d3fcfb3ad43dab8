"""Tag, user, provider and model repositories."""

import pytest

from wizeprompt.exceptions.base import DuplicateError, NotFoundError


@pytest.mark.asyncio
class TestTagRepository:

    async def test_get_by_ids_keeps_request_order_and_collapses_duplicates(self, tag_repository, tags):
        found = await tag_repository.get_by_ids([tags[2].id, tags[0].id, tags[2].id])

        assert [t.name for t in found] == ["ideas", "work"]

    async def test_get_by_ids_empty(self, tag_repository):
        assert await tag_repository.get_by_ids([]) == []

    async def test_get_by_ids_reports_every_missing_id(self, tag_repository, tags):
        with pytest.raises(NotFoundError) as exc_info:
            await tag_repository.get_by_ids([tags[0].id, 40, 41])

        assert exc_info.value.message == "Tag(s) not found: 40, 41"

    async def test_duplicate_tag_name(self, tag_repository, tags):
        with pytest.raises(DuplicateError):
            await tag_repository.create_tag("work")


@pytest.mark.asyncio
class TestUserRepository:

    async def test_create_user_normalizes_input(self, user_repository):
        user = await user_repository.create_user(username="  alan  ", email="  Alan@Example.COM ")

        assert user.username == "alan"
        assert user.email == "alan@example.com"
        assert user.global_parameters is None

    async def test_get_by_username(self, user_repository, created_user):
        assert (await user_repository.get_by_username("ada")).id == created_user.id
        assert await user_repository.get_by_username("nobody") is None

    async def test_set_global_parameters_replaces_mapping(self, user_repository, created_user):
        user = await user_repository.set_global_parameters(created_user, {"gpt-3.5-turbo": {"temperature": 0.1}})

        assert user.global_parameters == {"gpt-3.5-turbo": {"temperature": 0.1}}


@pytest.mark.asyncio
class TestLanguageModelRepository:

    async def test_get_with_provider(self, model_repository, models, provider):
        model = await model_repository.get_with_provider(models[1].id)

        assert model.name == "gpt-4"
        assert model.provider.image == provider.image

    async def test_get_with_provider_missing(self, model_repository):
        assert await model_repository.get_with_provider(77) is None

    async def test_duplicate_model_name(self, model_repository, models, provider):
        with pytest.raises(DuplicateError):
            await model_repository.create_model(name="gpt-4", provider_id=provider.id)
