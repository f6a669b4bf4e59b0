"""Tests for resource model validation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from looker_provisioner.resources import (
    ApiCredentialResource,
    FolderLookup,
    ModelSetResource,
    SettingResource,
)


class TestFolderLookup:
    def test_by_id(self) -> None:
        f = FolderLookup(id="12")
        assert f.address == "looker_folder.12"

    def test_by_name(self) -> None:
        f = FolderLookup(name="Engineering")
        assert f.address == "looker_folder.Engineering"

    def test_both_rejected(self) -> None:
        with pytest.raises(ValidationError, match="both given"):
            FolderLookup(id="1", name="Engineering")

    def test_neither_rejected(self) -> None:
        with pytest.raises(ValidationError, match="neither given"):
            FolderLookup()

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FolderLookup(name="")

    def test_is_data_source(self) -> None:
        assert FolderLookup.data_source is True
        assert ModelSetResource.data_source is False


class TestModelSetResource:
    def test_valid(self) -> None:
        m = ModelSetResource(name="marketing", models=["ecommerce", "thelook"])
        assert m.address == "looker_model_set.marketing"
        assert m.id is None

    def test_models_required(self) -> None:
        with pytest.raises(ValidationError):
            ModelSetResource(name="marketing")  # type: ignore[call-arg]

    def test_models_non_empty(self) -> None:
        with pytest.raises(ValidationError):
            ModelSetResource(name="marketing", models=[])

    def test_name_non_empty(self) -> None:
        with pytest.raises(ValidationError):
            ModelSetResource(name="", models=["a"])

    def test_extra_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            ModelSetResource(name="m", models=["a"], colour="red")  # type: ignore[call-arg]


class TestApiCredentialResource:
    def test_defaults(self) -> None:
        c = ApiCredentialResource(user_id=5)
        assert c.type == "api3"
        assert c.is_disabled is False
        assert c.address == "looker_api_credential.user_5"

    def test_address_includes_id_once_known(self) -> None:
        c = ApiCredentialResource(user_id=5, id="9")
        assert c.address == "looker_api_credential.user_5_9"

    def test_user_id_positive(self) -> None:
        with pytest.raises(ValidationError):
            ApiCredentialResource(user_id=0)


class TestSettingResource:
    def test_fixed_id(self) -> None:
        s = SettingResource()
        assert s.id == "looker_settings"
        assert s.address == "looker_setting.settings"

    def test_other_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SettingResource(id="other")  # type: ignore[arg-type]

    def test_nested_extra_forbidden(self) -> None:
        with pytest.raises(ValidationError):
            SettingResource.model_validate({"embed_config": {"unknown_flag": True}})

    def test_tracks_explicit_fields(self) -> None:
        s = SettingResource.model_validate(
            {"timezone": None, "custom_welcome_email": {"enabled": False}}
        )
        assert s.model_fields_set == {"timezone", "custom_welcome_email"}
        assert s.custom_welcome_email is not None
        assert s.custom_welcome_email.model_fields_set == {"enabled"}
