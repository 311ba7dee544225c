# tests/test_config.py
from __future__ import annotations

import pytest

import addchain.config as CONFIG
from addchain.runtime import APPLY, CFG, current
from addchain.search import SearchLimits
from addchain.utility import UserInputError
from addchain.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


def _write_profile(name: str, text: str) -> None:
    pdir = workspace_dir() / "profiles"
    pdir.mkdir(parents=True, exist_ok=True)
    (pdir / f"{name}.toml").write_text(text, encoding="utf-8")


def test_workspace_follows_env(workspace):
    assert workspace_dir() == workspace.resolve()


def test_seed_copies_packaged_profiles_once():
    root, seeded, copied = ensure_workspace_seeded()
    assert seeded
    assert copied["profiles"] >= 2
    assert (root / "profiles" / "default.toml").exists()
    # second run: nothing missing, nothing copied
    _, seeded_again, _ = ensure_workspace_seeded()
    assert not seeded_again


def test_seed_overwrite_restores_edits():
    ensure_workspace_seeded()
    p = workspace_dir() / "profiles" / "default.toml"
    p.write_text("# edited\n", encoding="utf-8")
    seed_workspace(overwrite=True)
    assert "SEARCH" in p.read_text(encoding="utf-8")


def test_load_default_profile():
    ensure_workspace_seeded()
    s = CONFIG.load_settings(None)
    assert s.name == "default"
    assert "_PROFILE_" not in s.as_dict()
    assert s.as_dict()["SEARCH"] == {"MAX_NODES": 0, "TIME_LIMIT_S": 0.0}


def test_bounded_profile_drives_search_limits():
    ensure_workspace_seeded()
    APPLY(CONFIG.load_settings("bounded"))
    assert current().profile_name == "bounded"
    assert CFG("OUTPUT.SHOW_STATS") is True
    assert SearchLimits.from_runtime() == SearchLimits(max_nodes=5_000_000, time_limit_s=30.0)


def test_unlimited_when_no_profile_applied():
    assert SearchLimits.from_runtime().unlimited


def test_apply_plain_dict():
    APPLY({"SEARCH": {"MAX_NODES": 7}, "BEHAVIOUR": {"DEBUG": True}})
    assert current().profile_name == "default"
    assert current().debug is True
    assert SearchLimits.from_runtime() == SearchLimits(max_nodes=7)


def test_debug_flag_synced_from_profile():
    _write_profile("loud", "[BEHAVIOUR]\nDEBUG = true\n")
    APPLY(CONFIG.load_settings("loud"))
    assert current().debug is True


def test_profile_without_meta_uses_file_name():
    _write_profile("plain", "[OUTPUT]\nCOLOR = false\n")
    s = CONFIG.load_settings("plain")
    assert s.name == "plain"
    assert s.description == "(no description)"


def test_broken_toml_is_a_user_error():
    _write_profile("broken", "[SEARCH\nMAX_NODES = 1\n")
    with pytest.raises(UserInputError) as exc:
        CONFIG.load_settings("broken")
    assert "broken.toml" in str(exc.value)


@pytest.mark.parametrize("body", [
    "[SEARCH]\nMAX_NODES = -1\n",
    "[SEARCH]\nMAX_NODES = \"many\"\n",
    "[SEARCH]\nTIME_LIMIT_S = -0.5\n",
    "[SEARCH]\nTIME_LIMIT_S = true\n",
])
def test_bad_search_values_rejected(body):
    _write_profile("bad", body)
    with pytest.raises(UserInputError):
        CONFIG.load_settings("bad")


def test_missing_profile():
    with pytest.raises(FileNotFoundError):
        CONFIG.load_settings("does-not-exist")


def test_current_profile_roundtrip():
    assert CONFIG.read_current_profile() is None
    CONFIG.write_current_profile("bounded.toml")
    assert CONFIG.read_current_profile() == "bounded"


def test_list_profiles():
    ensure_workspace_seeded()
    _write_profile("broken", "[[[")
    names = CONFIG.list_all_profiles()
    assert {"default", "bounded", "broken"} <= set(names)
    described = dict(CONFIG.list_profiles_with_descriptions())
    assert described["bounded"].startswith("Stop after")
    assert described["broken"] == "(unreadable)"
