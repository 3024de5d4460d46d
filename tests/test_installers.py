"""
Tests for the install dispatcher and the per-kind installer handlers.
"""

from pathlib import Path

import pytest

from setupkit.dispatch import dispatch_install, handler_for
from setupkit.errors import ConfigurationError, FilesystemError, ProcessError
from setupkit.installers import CopyInstaller, InstallContext, NativeInstaller, native_command
from setupkit.installers import native_install
from setupkit.registry import Options, Shortcut


@pytest.fixture
def ctx(expander, recorder, host_paths) -> InstallContext:
    return InstallContext(expander=expander, tools=recorder.host_tools(), start_menu_dir=host_paths.start_menu_dir)


@pytest.fixture
def artifact(tmp_path: Path) -> Path:
    p = tmp_path / "downloads" / "foo-1.2.3.exe"
    p.parent.mkdir(parents=True)
    p.write_bytes(b"MZ-foo")
    return p


class TestCopy:
    def test_copies_to_expanded_destination(self, ctx, artifact, program_files):
        opts = Options(destination="${PROGRAMFILES}/Foo/bin/foo.exe")
        dispatch_install(artifact, "copy", opts, ctx)
        assert (program_files / "Foo" / "bin" / "foo.exe").read_bytes() == b"MZ-foo"

    def test_missing_options(self, ctx, artifact):
        with pytest.raises(ConfigurationError) as ei:
            dispatch_install(artifact, "copy", None, ctx)
        assert ei.value.code == "MissingOptions"

    @pytest.mark.parametrize("destination", ["", "   "])
    def test_blank_destination(self, ctx, artifact, destination):
        with pytest.raises(ConfigurationError) as ei:
            dispatch_install(artifact, "copy", Options(destination=destination), ctx)
        assert ei.value.code == "MissingDestination"

    def test_copy_failure(self, ctx, tmp_path, program_files):
        with pytest.raises(FilesystemError) as ei:
            dispatch_install(tmp_path / "missing.exe", "copy", Options(destination="${PROGRAMFILES}/x.exe"), ctx)
        assert ei.value.code == "CopyFailed"

    def test_parent_is_a_file(self, ctx, artifact, program_files):
        (program_files / "blocker").write_text("file")
        with pytest.raises(FilesystemError) as ei:
            dispatch_install(artifact, "copy", Options(destination="${PROGRAMFILES}/blocker/sub/x.exe"), ctx)
        assert ei.value.code == "DirectoryCreateFailed"


class TestCustom:
    def test_runs_expanded_arguments(self, ctx, recorder, artifact):
        opts = Options(arguments=("${installer}", "/DIR=${PROGRAMFILES}\\Foo", "/quiet"))
        dispatch_install(artifact, "custom", opts, ctx)
        assert recorder.commands == [[str(artifact), f"/DIR={ctx.expander.environ['PROGRAMFILES']}\\Foo", "/quiet"]]

    def test_missing_options(self, ctx, recorder, artifact):
        with pytest.raises(ConfigurationError) as ei:
            dispatch_install(artifact, "custom", None, ctx)
        assert ei.value.code == "MissingOptions"
        assert recorder.commands == []

    def test_empty_arguments(self, ctx, recorder, artifact):
        with pytest.raises(ConfigurationError) as ei:
            dispatch_install(artifact, "custom", Options(arguments=()), ctx)
        assert ei.value.code == "MissingArguments"
        assert recorder.commands == []

    def test_process_failure(self, ctx, recorder, artifact):
        recorder.fail_commands = 1
        with pytest.raises(ProcessError) as ei:
            dispatch_install(artifact, "custom", Options(arguments=("${installer}",)), ctx)
        assert ei.value.code == "ProcessFailed"


class TestZip:
    def test_missing_destination_touches_nothing(self, ctx, recorder, artifact, program_files):
        with pytest.raises(ConfigurationError) as ei:
            dispatch_install(artifact, "zip", Options(destination=""), ctx)
        assert ei.value.code == "MissingDestination"
        assert recorder.extracted == []
        assert list(program_files.iterdir()) == []

    def test_missing_options(self, ctx, artifact):
        with pytest.raises(ConfigurationError) as ei:
            dispatch_install(artifact, "zip", None, ctx)
        assert ei.value.code == "MissingOptions"

    def test_extracts_and_creates_shortcuts(self, ctx, recorder, artifact, program_files, host_paths):
        opts = Options(
            destination="${PROGRAMFILES}\\Foo",
            shortcuts=(
                Shortcut(name="Foo", target="${PROGRAMFILES}\\Foo\\foo.exe"),
                Shortcut(name="Foo Help", target="${PROGRAMFILES}\\Foo\\help.chm"),
            ),
        )
        dispatch_install(artifact, "zip", opts, ctx)

        assert recorder.extracted == [(artifact, Path(f"{program_files}\\Foo"))]
        assert recorder.links == [
            (f"{program_files}\\Foo\\foo.exe", host_paths.start_menu_dir / "Foo.lnk"),
            (f"{program_files}\\Foo\\help.chm", host_paths.start_menu_dir / "Foo Help.lnk"),
        ]

    def test_shortcut_failure(self, ctx, recorder, artifact):
        recorder.fail_links = True
        opts = Options(destination="${PROGRAMFILES}\\Foo", shortcuts=(Shortcut(name="Foo", target="C:\\Foo\\foo.exe"),))
        with pytest.raises(FilesystemError) as ei:
            dispatch_install(artifact, "zip", opts, ctx)
        assert ei.value.code == "ShortcutCreationFailed"


class TestNative:
    @pytest.mark.parametrize(
        "kind,expected",
        [
            ("msi", ["msiexec.exe", "/q", "/i", "{p}", "ALLUSERS=1", "REBOOT=ReallySuppress"]),
            ("nsis", ["{p}", "/S", "/NCRC"]),
            ("innosetup", ["{p}", "/norestart", "/sp-", "/verysilent"]),
            ("advancedinstaller", ["{p}", "/q", "/i"]),
            ("as-is", ["{p}"]),
        ],
    )
    def test_command_lines(self, ctx, recorder, artifact, kind, expected):
        dispatch_install(artifact, kind, None, ctx)
        assert recorder.commands == [[a.format(p=str(artifact)) for a in expected]]

    def test_unknown_kind(self, ctx, recorder, artifact):
        with pytest.raises(ConfigurationError) as ei:
            dispatch_install(artifact, "wheel", None, ctx)
        assert ei.value.code == "UnknownInstallerKind"
        assert recorder.commands == []

    def test_native_command_unknown(self, artifact):
        with pytest.raises(ConfigurationError):
            native_command(artifact, "bogus")

    def test_process_failure(self, ctx, recorder, artifact):
        recorder.fail_commands = 1
        with pytest.raises(ProcessError) as ei:
            dispatch_install(artifact, "nsis", None, ctx)
        assert ei.value.code == "ProcessFailed"


class TestPrecedence:
    def test_bespoke_kind_wins_over_native(self, monkeypatch):
        monkeypatch.setitem(native_install.NATIVE_COMMANDS, "copy", lambda path: [path])
        assert isinstance(handler_for("copy"), CopyInstaller)

    def test_native_handler(self):
        assert isinstance(handler_for("msi"), NativeInstaller)
