import json

import pytest
from pydantic import ValidationError

from wizeprompt.schemas.conversation import ConversationCreate, ConversationUpdate
from wizeprompt.schemas.parameters import GlobalModelParameters, GlobalParameters


class TestGlobalParameters:

    def test_null_is_empty(self):
        assert GlobalParameters.model_validate(None).root == {}

    def test_legacy_json_text_is_parsed(self):
        stored = json.dumps({"gpt-4": {"userContext": "I am a chemist", "temperature": 0.9}})

        parsed = GlobalParameters.model_validate(stored)

        assert parsed.for_model("gpt-4") == GlobalModelParameters(user_context="I am a chemist", temperature=0.9)

    def test_blank_text_is_empty(self):
        assert GlobalParameters.model_validate("  ").root == {}

    def test_to_stored_drops_unset_fields(self):
        parsed = GlobalParameters.model_validate({"gpt-4": {"responseContext": "Short answers"}})

        assert parsed.to_stored() == {"gpt-4": {"responseContext": "Short answers"}}

    def test_rejects_out_of_range_temperature(self):
        with pytest.raises(ValidationError):
            GlobalParameters.model_validate({"gpt-4": {"temperature": 1.2}})


class TestEntryFor:

    STORED = {"gpt-4": {"temperature": 0.4}, "legacy-model": {"maxTokens": 100}}

    def test_reads_only_the_requested_model(self):
        assert GlobalParameters.entry_for(self.STORED, "gpt-4") == GlobalModelParameters(temperature=0.4)

    def test_missing_model_is_none(self):
        assert GlobalParameters.entry_for(self.STORED, "gpt-3.5-turbo") is None
        assert GlobalParameters.entry_for(None, "gpt-4") is None

    def test_legacy_text(self):
        assert GlobalParameters.entry_for(json.dumps(self.STORED), "gpt-4").temperature == 0.4

    def test_malformed_entry_for_the_model_raises(self):
        with pytest.raises(ValidationError):
            GlobalParameters.entry_for(self.STORED, "legacy-model")

    def test_non_mapping_raises(self):
        with pytest.raises(ValueError):
            GlobalParameters.entry_for(["gpt-4"], "gpt-4")


class TestConversationPayloads:

    def test_create_accepts_bare_and_object_tag_refs(self):
        payload = ConversationCreate.model_validate(
            {"idUser": 1, "idModel": 2, "title": "t", "tags": [3, {"id": 4}]}
        )

        assert payload.tag_ids == [3, 4]
        assert payload.use_global_parameters is False

    def test_create_accepts_null_tags(self):
        payload = ConversationCreate.model_validate({"idUser": 1, "idModel": 2, "title": "t", "tags": None})

        assert payload.tags is None
        assert payload.tag_ids == []

    def test_create_ignores_unknown_keys(self):
        payload = ConversationCreate.model_validate(
            {"idUser": 1, "idModel": 2, "title": "t", "active": False, "parameters": {"temperature": 1}}
        )

        assert not hasattr(payload, "parameters")

    def test_update_distinguishes_absent_and_empty_tags(self):
        assert ConversationUpdate.model_validate({"title": "x"}).tag_ids is None
        assert ConversationUpdate.model_validate({"tags": []}).tag_ids == []
