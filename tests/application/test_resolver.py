"""Resolution precedence: extra files, extra folders, then system and local roots."""

from __future__ import annotations

from pathlib import Path

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from lib_config_locator import (
    ApplicationIdentity,
    ConfigDescriptor,
    CurrentDirectoryUnavailable,
    DefaultPlatformDirs,
    FileFormat,
    NoProjectDirectory,
    OpenConfigError,
    PathResolver,
    SearchOptions,
    SystemLocationKind,
)
from tests.support import create_locator_sandbox

PREFER_SYSTEM = SearchOptions(prefer_system_over_local=True)
NO_DOT = SearchOptions(allow_dot_prefix=False)


def test_local_json_beats_default_toml(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    sandbox.write("local", "app.json", '{"source": "local"}')
    location = sandbox.resolver().resolve()
    assert location.path == sandbox.local / "app.json"
    assert location.file_format is FileFormat.JSON


def test_toml_precedes_json_in_same_directory(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    sandbox.write("local", "app.json", "{}")
    sandbox.write("local", "app.toml", "")
    location = sandbox.resolver().resolve()
    assert location.path == sandbox.local / "app.toml"
    assert location.file_format is FileFormat.TOML


def test_candidates_follow_full_precedence(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    extra_folder = tmp_path / "extra"
    resolver = sandbox.resolver(
        names=("app", "settings"),
        extra_files=[tmp_path / "explicit"],
        extra_folders=[extra_folder],
    )
    assert resolver.candidates() == [
        tmp_path / "explicit",
        extra_folder / "app",
        extra_folder / ".app",
        extra_folder / "settings",
        extra_folder / ".settings",
        sandbox.local / "app",
        sandbox.local / ".app",
        sandbox.local / "settings",
        sandbox.local / ".settings",
        sandbox.system / "app",
        sandbox.system / ".app",
        sandbox.system / "settings",
        sandbox.system / ".settings",
    ]


def test_prefer_system_swaps_roots_only(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    resolver = sandbox.resolver(options=PREFER_SYSTEM.with_allow_dot_prefix(False), extra_folders=[tmp_path / "x"])
    assert resolver.candidates() == [tmp_path / "x" / "app", sandbox.system / "app", sandbox.local / "app"]


@pytest.mark.parametrize(("options", "winner"), [(SearchOptions.DEFAULT, "local"), (PREFER_SYSTEM, "system")])
def test_root_precedence_is_symmetric(tmp_path: Path, options: SearchOptions, winner: str) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    local = sandbox.write("local", "app.toml", 'source = "local"\n')
    system = sandbox.write("system", "app.toml", 'source = "system"\n')
    location = sandbox.resolver(options=options).resolve()
    assert location.path == {"local": local, "system": system}[winner]
    assert location.read() == {"source": winner}


def test_extra_file_beats_extra_folder_and_roots(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    folder = tmp_path / "folder"
    folder.mkdir()
    (folder / "app.toml").write_text("", encoding="utf-8")
    sandbox.write("local", "app.toml", "")
    explicit = tmp_path / "service.cfg"
    (tmp_path / "service.cfg.json").write_text('{"explicit": true}', encoding="utf-8")
    resolver = sandbox.resolver(extra_files=[explicit], extra_folders=[folder])
    location = resolver.resolve()
    assert location.path == tmp_path / "service.cfg.json"
    assert location.read() == {"explicit": True}


def test_extra_folder_beats_roots(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    folder = tmp_path / "folder"
    folder.mkdir()
    (folder / ".app.ron").write_text("(from: \"folder\")", encoding="utf-8")
    sandbox.write("local", "app.toml", "")
    location = sandbox.resolver(extra_folders=[folder]).resolve()
    assert location.path == folder / ".app.ron"
    assert location.file_format is FileFormat.RON


def test_extra_file_with_literal_name_uses_default_format(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    literal = tmp_path / "config.txt"
    literal.write_text('{"a": 1}', encoding="utf-8")
    location = sandbox.resolver(default_format=FileFormat.JSON, extra_files=[literal]).resolve()
    assert (location.path, location.file_format) == (literal, FileFormat.JSON)
    assert location.read() == {"a": 1}


def test_extra_file_with_format_suffix_is_read_in_that_format(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    literal = tmp_path / "conf.json"
    literal.write_text('{"from": "json"}', encoding="utf-8")
    location = sandbox.resolver(default_format=FileFormat.TOML, extra_files=[literal]).resolve()
    assert (location.path, location.file_format) == (literal, FileFormat.JSON)
    assert location.read() == {"from": "json"}


def test_names_tried_in_order_before_dotted_forms(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    sandbox.write("local", ".app.toml", "")
    sandbox.write("local", "settings.toml", "")
    assert sandbox.resolver(names=("app", "settings")).resolve().path == sandbox.local / ".app.toml"
    sandbox.write("local", "app.json", "{}")
    assert sandbox.resolver(names=("app", "settings")).resolve().path == sandbox.local / "app.json"


def test_dot_prefix_disabled_never_matches_dotted(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    sandbox.write("local", ".app.toml", "")
    sandbox.write("system", ".app.json", "{}")
    location = sandbox.resolver(options=NO_DOT).resolve()
    assert location.path is None
    assert location.file_format is FileFormat.TOML


def test_unresolved_carries_default_format(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    location = sandbox.resolver(default_format=FileFormat.RON).resolve()
    assert not location.is_resolved
    assert location.file_format is FileFormat.RON


def test_missing_default_format_uses_process_default(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    resolver = sandbox.resolver(default_format=None)
    assert resolver.default_format is FileFormat.TOML
    assert resolver.default_local_config_file() == sandbox.local / "app.toml"


def test_default_files(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    resolver = sandbox.resolver(names=("first", "second"), default_format=FileFormat.JSON)
    assert resolver.default_system_config_file() == sandbox.system / "first.json"
    assert resolver.default_local_config_file() == sandbox.local / "first.json"
    assert resolver.default_config_file() == sandbox.local / "first.json"
    preferring = sandbox.resolver(names=("first",), default_format=FileFormat.JSON, options=PREFER_SYSTEM)
    assert preferring.default_config_file() == sandbox.system / "first.json"


def test_missing_system_root_is_hard_failure(tmp_path: Path) -> None:
    descriptor = ConfigDescriptor(ApplicationIdentity("org", "Acme", "Demo"), ["app"])
    resolver = PathResolver(descriptor, platform_dirs=DefaultPlatformDirs(platform="plan9"), cwd=tmp_path)
    with pytest.raises(NoProjectDirectory):
        resolver.resolve()
    with pytest.raises(NoProjectDirectory):
        resolver.default_system_config_file()
    assert resolver.default_local_config_file() == tmp_path / "app.toml"


def test_missing_working_directory_is_open_class_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    resolver = PathResolver(sandbox.descriptor(), platform_dirs=sandbox.platform_dirs)

    def broken_cwd() -> Path:
        raise FileNotFoundError("gone")

    monkeypatch.setattr(Path, "cwd", staticmethod(broken_cwd))
    with pytest.raises(CurrentDirectoryUnavailable) as excinfo:
        resolver.resolve()
    assert isinstance(excinfo.value, OpenConfigError)


def test_local_root_defaults_to_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    monkeypatch.chdir(sandbox.local)
    resolver = PathResolver(sandbox.descriptor(), platform_dirs=sandbox.platform_dirs)
    assert resolver.local_root() == Path.cwd()


def test_root_accessors_ignore_selected_kind(tmp_path: Path) -> None:
    fake_home = tmp_path / "home"
    dirs = DefaultPlatformDirs(platform="darwin", home=fake_home)
    descriptor = ConfigDescriptor(
        ApplicationIdentity("org", "Acme", "Demo"),
        ["app"],
        options=SearchOptions(system_location_kind=SystemLocationKind.PREFERENCE),
    )
    resolver = PathResolver(descriptor, platform_dirs=dirs, cwd=tmp_path)
    assert resolver.config_root() == fake_home / "Library" / "Application Support" / "org.Acme.Demo"
    assert resolver.preference_root() == fake_home / "Library" / "Preferences" / "org.Acme.Demo"
    assert resolver.system_root() == resolver.preference_root()
    assert resolver.candidates()[-2:] == [resolver.preference_root() / "app", resolver.preference_root() / ".app"]


def test_resolution_does_not_mutate_descriptor(tmp_path: Path) -> None:
    sandbox = create_locator_sandbox(tmp_path)
    descriptor = sandbox.descriptor()
    snapshot = ConfigDescriptor(
        descriptor.identity,
        descriptor.candidate_names,
        descriptor.default_format,
        descriptor.extra_search_files,
        descriptor.extra_search_folders,
        descriptor.options,
    )
    sandbox.resolver(descriptor).resolve().fallback_to_default()
    assert descriptor == snapshot


_NAMES = st.lists(
    st.text(alphabet="abcdefghijklmnopqrstuvwxyz_-", min_size=1, max_size=8),
    min_size=1,
    max_size=4,
    unique=True,
)


@settings(max_examples=40, deadline=None)
@given(names=_NAMES, file_format=st.sampled_from([FileFormat.TOML, FileFormat.JSON, FileFormat.RON]))
def test_first_name_file_is_always_found(tmp_path_factory, names: list[str], file_format: FileFormat) -> None:
    sandbox = create_locator_sandbox(tmp_path_factory.mktemp("prop"))
    target = sandbox.write("local", f"{names[0]}.{file_format.extension}", "")
    location = sandbox.resolver(names=tuple(names)).resolve()
    assert (location.path, location.file_format) == (target, file_format)
