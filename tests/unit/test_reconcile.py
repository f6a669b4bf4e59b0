"""Tests for settings reconciliation."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest

from looker_provisioner.handlers.settings import Setting
from looker_provisioner.plugin import reconcile
from looker_provisioner.plugin.errors import SettingConstraintError
from looker_provisioner.plugin.reconcile import ChangeRecord, FieldState
from looker_provisioner.resources.setting import SettingResource

if TYPE_CHECKING:
    from collections.abc import Callable

    import requests

    from looker_provisioner.core.provider import LookerProvider

SETTING_URL = "https://looker.test/api/4.0/setting"


def _current(**overrides: Any) -> Setting:
    body: dict[str, Any] = {
        "timezone": "UTC",
        "onboarding_enabled": True,
        "privatelabel_configuration": {
            "default_title": "Acme",
            "custom_welcome_email_advanced": False,
            "logo_url": "https://cdn.test/logo.png",
        },
        "custom_welcome_email": {
            "enabled": True,
            "content": "Welcome",
            "subject": None,
            "header": None,
        },
        "embed_config": {"embed_enabled": False, "embed_cookieless_v2": False},
        "embed_enabled": False,
    }
    body.update(overrides)
    return Setting.model_validate(body)


def _desired(body: dict[str, Any]) -> SettingResource:
    return SettingResource.model_validate(body)


def _reconcile(current: Setting, desired: SettingResource) -> list[ChangeRecord]:
    return reconcile.apply_constraints(
        reconcile.compute_changes(current, desired), current, desired
    )


def _by_path(changes: list[ChangeRecord]) -> dict[str, ChangeRecord]:
    return {c.path: c for c in changes}


class TestComputeChanges:
    def test_only_explicit_fields_are_compared(self) -> None:
        changes = reconcile.compute_changes(_current(), _desired({"timezone": "Europe/Paris"}))

        assert changes == [ChangeRecord("timezone", "scalar", "UTC", "Europe/Paris")]

    def test_equal_values_produce_nothing(self) -> None:
        desired = _desired({"timezone": "UTC", "custom_welcome_email": {"enabled": True}})

        assert reconcile.compute_changes(_current(), desired) == []

    def test_explicit_null_is_a_change(self) -> None:
        [change] = reconcile.compute_changes(_current(), _desired({"timezone": None}))

        assert change.old == "UTC"
        assert change.new is None
        assert change.staged

    def test_nested_field_grouped(self) -> None:
        desired = _desired({"marketplace_automation": {"install_enabled": True}})

        [change] = reconcile.compute_changes(_current(), desired)

        assert change.path == "marketplace_automation.install_enabled"
        assert change.group == "marketplace_automation"
        assert change.old is None

    def test_read_only_fields_skipped(self) -> None:
        desired = _desired({"embed_enabled": True, "embed_config": {"embed_enabled": True}})

        assert reconcile.compute_changes(_current(), desired) == []

    def test_write_only_always_staged(self) -> None:
        desired = _desired({"override_warnings": True})

        [change] = reconcile.compute_changes(_current(), desired)

        assert change.write_only
        assert change.old is None
        assert change.staged


class TestConstraints:
    def test_advanced_off_rejects_explicit_subject(self) -> None:
        desired = _desired({"custom_welcome_email": {"subject": "Hello"}})

        with pytest.raises(SettingConstraintError) as exc_info:
            _reconcile(_current(), desired)

        assert exc_info.value.path == "custom_welcome_email.subject"
        assert "custom_welcome_email_advanced" in str(exc_info.value)

    def test_advanced_off_clears_remote_subject(self) -> None:
        current = _current(
            custom_welcome_email={"enabled": True, "content": "Welcome", "subject": "Old"}
        )

        changes = _by_path(_reconcile(current, _desired({"timezone": "UTC"})))

        cleared = changes["custom_welcome_email.subject"]
        assert cleared.state is FieldState.SERVER_CONSTRAINED_CLEARED
        assert cleared.old == "Old"
        assert cleared.new is None
        assert "custom_welcome_email.header" not in changes

    def test_advanced_on_keeps_subject(self) -> None:
        desired = _desired(
            {
                "privatelabel_configuration": {"custom_welcome_email_advanced": True},
                "custom_welcome_email": {"subject": "Hello"},
            }
        )

        changes = _by_path(_reconcile(_current(), desired))

        assert changes["custom_welcome_email.subject"].staged
        assert changes["privatelabel_configuration.custom_welcome_email_advanced"].staged

    def test_unknown_advanced_flag_treated_as_off(self) -> None:
        # A null flag counts as off, so an explicit header is rejected rather
        # than passed through to the server.
        current = _current(privatelabel_configuration=None)
        desired = _desired({"custom_welcome_email": {"header": "Hi"}})

        with pytest.raises(SettingConstraintError, match="custom_welcome_email.header"):
            _reconcile(current, desired)

    def test_welcome_disabled_clears_content(self) -> None:
        current = _current(privatelabel_configuration={"custom_welcome_email_advanced": True})
        desired = _desired({"custom_welcome_email": {"enabled": False}})

        changes = _by_path(_reconcile(current, desired))

        assert changes["custom_welcome_email.enabled"].staged
        assert (
            changes["custom_welcome_email.content"].state
            is FieldState.SERVER_CONSTRAINED_CLEARED
        )
        # Already empty remotely; nothing to report.
        assert "custom_welcome_email.subject" not in changes
        assert "custom_welcome_email.header" not in changes

    def test_welcome_disabled_rejects_explicit_content(self) -> None:
        current = _current(custom_welcome_email={"enabled": True, "content": None})
        desired = _desired({"custom_welcome_email": {"enabled": False, "content": "Hi"}})

        with pytest.raises(SettingConstraintError) as exc_info:
            _reconcile(current, desired)

        assert exc_info.value.path == "custom_welcome_email.content"
        assert exc_info.value.value == "Hi"
        assert "custom_welcome_email.enabled" in exc_info.value.constraint

    def test_remote_welcome_disabled_rejects_explicit_content(self) -> None:
        current = _current(custom_welcome_email={"enabled": False})
        desired = _desired({"custom_welcome_email": {"content": "Hi"}})

        with pytest.raises(SettingConstraintError, match="custom_welcome_email.content"):
            _reconcile(current, desired)

    def test_welcome_disabled_accepts_empty_content(self) -> None:
        current = _current(custom_welcome_email={"enabled": True, "content": "Welcome"})
        desired = _desired({"custom_welcome_email": {"enabled": False, "content": ""}})

        changes = _by_path(_reconcile(current, desired))

        assert (
            changes["custom_welcome_email.content"].state
            is FieldState.SERVER_CONSTRAINED_CLEARED
        )

    def test_cookieless_requires_embedding(self) -> None:
        desired = _desired({"embed_config": {"embed_cookieless_v2": True}})

        with pytest.raises(SettingConstraintError) as exc_info:
            _reconcile(_current(), desired)

        assert exc_info.value.path == "embed_config.embed_cookieless_v2"
        assert "embed_config.embed_enabled" in exc_info.value.constraint

    def test_cookieless_allowed_when_embedding_enabled(self) -> None:
        current = _current(embed_config={"embed_enabled": True, "embed_cookieless_v2": False})
        desired = _desired({"embed_config": {"embed_cookieless_v2": True}})

        [change] = _reconcile(current, desired)

        assert change.path == "embed_config.embed_cookieless_v2"
        assert change.staged

    def test_configured_embed_enabled_does_not_bypass_check(self) -> None:
        desired = _desired({"embed_config": {"embed_cookieless_v2": True, "embed_enabled": True}})

        with pytest.raises(SettingConstraintError) as exc_info:
            _reconcile(_current(), desired)

        assert exc_info.value.path == "embed_config.embed_cookieless_v2"

    def test_configured_embed_enabled_does_not_block(self) -> None:
        current = _current(embed_config={"embed_enabled": True, "embed_cookieless_v2": False})
        desired = _desired({"embed_config": {"embed_cookieless_v2": True, "embed_enabled": False}})

        [change] = _reconcile(current, desired)

        assert change.path == "embed_config.embed_cookieless_v2"

    def test_deprecated_cookieless_requires_embedding(self) -> None:
        desired = _desired({"embed_cookieless_v2": True})

        with pytest.raises(SettingConstraintError) as exc_info:
            _reconcile(_current(), desired)

        assert exc_info.value.path == "embed_cookieless_v2"

    def test_deprecated_cookieless_falls_back_to_top_level_flag(self) -> None:
        current = _current(embed_config=None, embed_enabled=True)

        [change] = _reconcile(current, _desired({"embed_cookieless_v2": True}))

        assert change.path == "embed_cookieless_v2"
        assert change.staged

    def test_cookieless_not_checked_unless_set(self) -> None:
        current = _current(embed_config={"embed_enabled": False, "embed_cookieless_v2": True})

        assert _reconcile(current, _desired({"timezone": "Asia/Tokyo"}))[0].path == "timezone"

    def test_inputs_not_mutated(self) -> None:
        current = _current(
            custom_welcome_email={"enabled": True, "content": "Welcome", "subject": "Old"}
        )
        desired = _desired({"timezone": "Asia/Tokyo"})
        changes = reconcile.compute_changes(current, desired)
        snapshot = list(changes)

        result = reconcile.apply_constraints(changes, current, desired)

        assert changes == snapshot
        assert result is not changes
        assert current.custom_welcome_email is not None
        assert current.custom_welcome_email.subject == "Old"


class TestDesiredViolations:
    def test_advanced_off_with_subject(self) -> None:
        desired = _desired(
            {
                "privatelabel_configuration": {"custom_welcome_email_advanced": False},
                "custom_welcome_email": {"subject": "Hello", "header": ""},
            }
        )

        [err] = reconcile.desired_violations(desired)

        assert err.path == "custom_welcome_email.subject"

    def test_welcome_disabled_with_content(self) -> None:
        desired = _desired(
            {"custom_welcome_email": {"enabled": False, "content": "Hi", "header": None}}
        )

        [err] = reconcile.desired_violations(desired)

        assert err.path == "custom_welcome_email.content"

    def test_conflict_reported_once(self) -> None:
        desired = _desired(
            {
                "privatelabel_configuration": {"custom_welcome_email_advanced": False},
                "custom_welcome_email": {"enabled": False, "subject": "Hello"},
            }
        )

        [err] = reconcile.desired_violations(desired)

        assert err.path == "custom_welcome_email.subject"
        assert "custom_welcome_email_advanced" in err.constraint

    def test_configured_read_only_flag_decides_nothing(self) -> None:
        for enabled in (True, False):
            desired = _desired(
                {"embed_config": {"embed_cookieless_v2": True, "embed_enabled": enabled}}
            )
            assert reconcile.desired_violations(desired) == []

    def test_needs_remote_state_to_decide(self) -> None:
        assert reconcile.desired_violations(_desired({"custom_welcome_email": {"subject": "x"}})) == []


class TestBuildPatch:
    def test_nests_groups_and_withholds_cleared(self) -> None:
        changes = [
            ChangeRecord("timezone", "scalar", "UTC", None),
            ChangeRecord("custom_welcome_email.enabled", "custom_welcome_email", True, False),
            ChangeRecord(
                "custom_welcome_email.content",
                "custom_welcome_email",
                "Welcome",
                None,
                FieldState.SERVER_CONSTRAINED_CLEARED,
            ),
            ChangeRecord("embed_config.domain_allowlist", "embed_config", None, ["a.test"]),
        ]

        assert reconcile.build_patch(changes) == {
            "timezone": None,
            "custom_welcome_email": {"enabled": False},
            "embed_config": {"domain_allowlist": ["a.test"]},
        }

    def test_empty(self) -> None:
        assert reconcile.build_patch([]) == {}


class TestGroupStates:
    def test_local_change_wins_over_clear(self) -> None:
        current = _current(
            custom_welcome_email={"enabled": True, "content": "Welcome", "subject": "Old"}
        )
        desired = _desired({"custom_welcome_email": {"content": "Hi there"}})

        states = reconcile.group_states(_reconcile(current, desired))

        assert states["custom_welcome_email"] is FieldState.LOCALLY_MODIFIED
        assert states["scalar"] is FieldState.UNCHANGED

    def test_clear_only_group(self) -> None:
        current = _current(
            privatelabel_configuration={"custom_welcome_email_advanced": True},
            custom_welcome_email={"enabled": True, "subject": "Old"},
        )
        desired = _desired({"privatelabel_configuration": {"custom_welcome_email_advanced": False}})

        states = reconcile.group_states(_reconcile(current, desired))

        assert states["privatelabel_configuration"] is FieldState.LOCALLY_MODIFIED
        assert states["custom_welcome_email"] is FieldState.SERVER_CONSTRAINED_CLEARED
        assert set(states) == set(reconcile.GROUPS)


class TestSettingAttributes:
    def test_write_only_reported_as_none(self) -> None:
        attrs = reconcile.setting_attributes(_current())

        assert attrs["id"] == "looker_settings"
        assert attrs["timezone"] == "UTC"
        assert attrs["override_warnings"] is None
        assert attrs["privatelabel_configuration"]["logo_file"] is None
        assert attrs["privatelabel_configuration"]["logo_url"] == "https://cdn.test/logo.png"


class TestPlanApply:
    def test_plan_sends_no_writes(
        self,
        provider: LookerProvider,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
        sent: Callable[[], list[tuple[str, str]]],
    ) -> None:
        session.request.return_value = make_response(200, _current().model_dump(mode="json"))

        plan = reconcile.plan(provider.settings, _desired({"timezone": "Asia/Tokyo"}))

        assert plan.has_changes
        assert plan.patch == {"timezone": "Asia/Tokyo"}
        assert sent() == [("GET", SETTING_URL)]

    def test_apply_single_patch_then_refetch(
        self,
        provider: LookerProvider,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
        sent: Callable[[], list[tuple[str, str]]],
    ) -> None:
        before = _current().model_dump(mode="json")
        after = _current(
            custom_welcome_email={"enabled": False, "content": None}, timezone="Asia/Tokyo"
        ).model_dump(mode="json")
        session.request.side_effect = [
            make_response(200, before),
            make_response(200, after),
            make_response(200, after),
        ]
        desired = _desired({"timezone": "Asia/Tokyo", "custom_welcome_email": {"enabled": False}})

        result = reconcile.apply(provider.settings, desired)

        assert sent() == [("GET", SETTING_URL), ("PATCH", SETTING_URL), ("GET", SETTING_URL)]
        patch_call = session.request.call_args_list[1]
        assert patch_call.kwargs["json"] == {
            "timezone": "Asia/Tokyo",
            "custom_welcome_email": {"enabled": False},
        }
        assert result.setting.timezone == "Asia/Tokyo"
        cleared = [c for c in result.changes if not c.staged]
        assert [c.path for c in cleared] == ["custom_welcome_email.content"]

    def test_write_only_sent_on_patch(
        self,
        provider: LookerProvider,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
    ) -> None:
        body = _current().model_dump(mode="json")
        session.request.side_effect = [make_response(200, body) for _ in range(3)]
        desired = _desired({"host_url": "https://bi.acme.test", "override_warnings": True})

        reconcile.apply(provider.settings, desired)

        assert session.request.call_args_list[1].kwargs["json"] == {
            "host_url": "https://bi.acme.test",
            "override_warnings": True,
        }

    def test_no_changes_skips_patch(
        self,
        provider: LookerProvider,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
        sent: Callable[[], list[tuple[str, str]]],
    ) -> None:
        session.request.return_value = make_response(200, _current().model_dump(mode="json"))

        result = reconcile.apply(provider.settings, _desired({"timezone": "UTC"}))

        assert sent() == [("GET", SETTING_URL)]
        assert result.changes == []

    @pytest.mark.parametrize(
        "body",
        [
            {
                "privatelabel_configuration": {"custom_welcome_email_advanced": False},
                "custom_welcome_email": {"subject": "Hello"},
            },
            {"custom_welcome_email": {"enabled": False, "content": "Hi"}},
        ],
        ids=["advanced-off-subject", "welcome-off-content"],
    )
    def test_local_violation_fails_before_any_request(
        self, provider: LookerProvider, session: MagicMock, body: dict[str, Any]
    ) -> None:
        with pytest.raises(SettingConstraintError):
            reconcile.plan(provider.settings, _desired(body))

        session.request.assert_not_called()

    def test_remote_violation_sends_no_patch(
        self,
        provider: LookerProvider,
        session: MagicMock,
        make_response: Callable[..., requests.Response],
        sent: Callable[[], list[tuple[str, str]]],
    ) -> None:
        session.request.return_value = make_response(200, _current().model_dump(mode="json"))
        desired = _desired({"embed_config": {"embed_cookieless_v2": True}})

        with pytest.raises(SettingConstraintError):
            reconcile.apply(provider.settings, desired)

        assert sent() == [("GET", SETTING_URL)]
