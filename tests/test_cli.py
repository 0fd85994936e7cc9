"""Tests for sound_send_tooling.cli (dispatch, release/verify/matrix, resolve/link)."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from sound_send_tooling.toolchain import HostPlatform

LINUX_X86_64_HOST = HostPlatform("linux", "x86_64")


class TestMainDispatch:
    def test_no_args_runs_release(self) -> None:
        from sound_send_tooling.cli.main import main

        with (
            patch("sys.argv", ["sound-send-tooling"]),
            patch("sound_send_tooling.cli.release_cmd.run_release_argv") as m_release,
        ):
            main()
        m_release.assert_called_once_with([])

    def test_flags_only_runs_release(self) -> None:
        from sound_send_tooling.cli.main import main

        with (
            patch("sys.argv", ["sound-send-tooling", "--project-root", "/src/app"]),
            patch("sound_send_tooling.cli.release_cmd.run_release_argv") as m_release,
        ):
            main()
        m_release.assert_called_once_with(["--project-root", "/src/app"])

    def test_unknown_command_exits_1(self, capsys) -> None:
        from sound_send_tooling.cli.main import main

        with patch("sys.argv", ["sound-send-tooling", "deploy"]), pytest.raises(SystemExit) as e:
            main()
        assert e.value.code == 1
        assert "Unknown command: deploy" in capsys.readouterr().err


class TestReleaseCommand:
    def _patched_toolchain(self):
        return (
            patch(
                "sound_send_tooling.cli.release_cmd.detect_host_platform",
                return_value=LINUX_X86_64_HOST,
            ),
            patch(
                "sound_send_tooling.toolchain.probe.shutil.which",
                side_effect=lambda name: f"/usr/bin/{name}",
            ),
            patch(
                "sound_send_tooling.toolchain.probe.run_command",
                return_value=MagicMock(returncode=0),
            ),
        )

    def test_release_success_exits_0(self, cargo_project: Path) -> None:
        from sound_send_tooling.cli.release_cmd import run_release_argv

        host, which, probe_run = self._patched_toolchain()
        with (
            host,
            which,
            probe_run,
            patch(
                "sound_send_tooling.verify.pipeline.run_command",
                return_value=MagicMock(returncode=0, stdout="", stderr=""),
            ),
            patch(
                "sound_send_tooling.orchestrator.run_command", return_value=MagicMock(returncode=0)
            ) as m_build,
            pytest.raises(SystemExit) as e,
        ):
            run_release_argv(["--project-root", str(cargo_project)])
        assert e.value.code == 0
        assert m_build.call_count == 6

    def test_release_verification_failure_exits_1(self, cargo_project: Path, capsys) -> None:
        from sound_send_tooling.cli.release_cmd import run_release_argv

        host, which, probe_run = self._patched_toolchain()
        with (
            host,
            which,
            probe_run,
            patch(
                "sound_send_tooling.verify.pipeline.run_command",
                return_value=MagicMock(returncode=1, stdout="", stderr="Diff in src/lib.rs"),
            ),
            patch("sound_send_tooling.orchestrator.run_command") as m_build,
            pytest.raises(SystemExit) as e,
        ):
            run_release_argv(["--project-root", str(cargo_project)])
        assert e.value.code == 1
        m_build.assert_not_called()
        err = capsys.readouterr().err
        assert "fmt" in err
        assert "Diff in src/lib.rs" in err

    def test_release_interrupted_exits_130(self, cargo_project: Path) -> None:
        from sound_send_tooling.cli.release_cmd import run_release_argv

        host, which, probe_run = self._patched_toolchain()
        with (
            host,
            which,
            probe_run,
            patch("sound_send_tooling.verify.pipeline.run_command", side_effect=KeyboardInterrupt),
            pytest.raises(SystemExit) as e,
        ):
            run_release_argv(["--project-root", str(cargo_project)])
        assert e.value.code == 130

    def test_invalid_matrix_exits_1_before_running(self, cargo_project: Path, capsys) -> None:
        from sound_send_tooling.cli.release_cmd import run_release_argv

        (cargo_project / "sound-send-tooling.yaml").write_text(
            "matrix:\n  - {target: native, profile: release, bin: udp_server}\n"
        )
        with (
            patch("sound_send_tooling.verify.pipeline.run_command") as m_verify,
            pytest.raises(SystemExit) as e,
        ):
            run_release_argv(["--project-root", str(cargo_project)])
        assert e.value.code == 1
        m_verify.assert_not_called()
        assert "udp_server" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "entry",
        ["{target: native, features: 3}", "{target: native, bin: [udp_sender]}"],
    )
    def test_mistyped_matrix_entry_exits_1(
        self, cargo_project: Path, capsys, entry: str
    ) -> None:
        from sound_send_tooling.cli.release_cmd import run_release_argv

        (cargo_project / "sound-send-tooling.yaml").write_text(f"matrix:\n  - {entry}\n")
        with (
            patch("sound_send_tooling.verify.pipeline.run_command") as m_verify,
            pytest.raises(SystemExit) as e,
        ):
            run_release_argv(["--project-root", str(cargo_project)])
        assert e.value.code == 1
        m_verify.assert_not_called()
        assert "Matrix entry" in capsys.readouterr().err

    def test_matrix_lists_jobs_and_linkers(self, cargo_project: Path, capsys) -> None:
        from sound_send_tooling.cli.release_cmd import run_matrix_argv

        host, which, probe_run = self._patched_toolchain()
        with host, which, probe_run, pytest.raises(SystemExit) as e:
            run_matrix_argv(["--project-root", str(cargo_project)])
        assert e.value.code == 0
        out = capsys.readouterr().out
        assert "x86_64-pc-windows-gnu/release/bin=udp_sender" in out
        assert "linker: x86_64-w64-mingw32-gcc" in out


class TestToolchainCommands:
    def _mingw_override(self, root: Path) -> None:
        (root / "sound-send-tooling.yaml").write_text(
            "default_compiler: cc\n"
            "candidates:\n"
            "  x86_64-pc-windows-gnu: [my-mingw-gcc]\n"
        )

    def _only_on_path(self, *names: str):
        return (
            patch(
                "sound_send_tooling.toolchain.probe.shutil.which",
                side_effect=lambda name: f"/usr/bin/{name}" if name in names else None,
            ),
            patch(
                "sound_send_tooling.toolchain.probe.run_command",
                return_value=MagicMock(returncode=0),
            ),
        )

    def test_resolve_prints_linker(self, tmp_path: Path, monkeypatch, capsys) -> None:
        from sound_send_tooling.cli.toolchain_cmd import run_resolve_argv

        monkeypatch.chdir(tmp_path)
        with (
            patch(
                "sound_send_tooling.cli.toolchain_cmd.detect_host_platform",
                return_value=LINUX_X86_64_HOST,
            ),
            pytest.raises(SystemExit) as e,
        ):
            run_resolve_argv(["x86_64-unknown-linux-gnu"])
        assert e.value.code == 0
        assert capsys.readouterr().out.strip() == "gcc"

    def test_resolve_honours_project_config(self, tmp_path: Path, capsys) -> None:
        from sound_send_tooling.cli.toolchain_cmd import run_resolve_argv

        self._mingw_override(tmp_path)
        which, version = self._only_on_path("x86_64-w64-mingw32-gcc", "my-mingw-gcc")
        with (
            patch(
                "sound_send_tooling.cli.toolchain_cmd.detect_host_platform",
                return_value=LINUX_X86_64_HOST,
            ),
            which,
            version,
            pytest.raises(SystemExit) as e,
        ):
            run_resolve_argv(["--project-root", str(tmp_path), "x86_64-pc-windows-gnu"])
        assert e.value.code == 0
        assert capsys.readouterr().out.strip() == "my-mingw-gcc"

    def test_resolve_explicit_config_sets_native_compiler(self, tmp_path: Path, capsys) -> None:
        from sound_send_tooling.cli.toolchain_cmd import run_resolve_argv

        self._mingw_override(tmp_path)
        with (
            patch(
                "sound_send_tooling.cli.toolchain_cmd.detect_host_platform",
                return_value=LINUX_X86_64_HOST,
            ),
            pytest.raises(SystemExit) as e,
        ):
            run_resolve_argv(["--config", str(tmp_path / "sound-send-tooling.yaml"), "native"])
        assert e.value.code == 0
        assert capsys.readouterr().out.strip() == "cc"

    def test_resolve_unknown_target_exits_1(self, tmp_path: Path, monkeypatch, capsys) -> None:
        from sound_send_tooling.cli.toolchain_cmd import run_resolve_argv

        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as e:
            run_resolve_argv(["mips-unknown-linux-gnu"])
        assert e.value.code == 1
        assert "Unknown target" in capsys.readouterr().err

    def test_link_forwards_to_proxy(self, tmp_path: Path, monkeypatch) -> None:
        from sound_send_tooling.cli.toolchain_cmd import run_link_argv

        monkeypatch.chdir(tmp_path)
        with (
            patch("sound_send_tooling.cli.toolchain_cmd.run_proxy", return_value=7) as m_proxy,
            pytest.raises(SystemExit) as e,
        ):
            run_link_argv(["x86_64-pc-windows-gnu", "-o", "app.exe", "main.o"])
        assert e.value.code == 7
        m_proxy.assert_called_once_with(
            "x86_64-pc-windows-gnu",
            ["-o", "app.exe", "main.o"],
            default_compiler="gcc",
            overrides={},
        )

    def test_link_config_flag_only_before_triple(self, tmp_path: Path, monkeypatch) -> None:
        from sound_send_tooling.cli.toolchain_cmd import run_link_argv

        monkeypatch.chdir(tmp_path)
        config = tmp_path / "elsewhere.yaml"
        config.write_text("default_compiler: cc\n")
        with (
            patch("sound_send_tooling.cli.toolchain_cmd.run_proxy", return_value=0) as m_proxy,
            pytest.raises(SystemExit),
        ):
            run_link_argv(["--config", str(config), "native", "--config", "x.o"])
        m_proxy.assert_called_once_with(
            "native", ["--config", "x.o"], default_compiler="cc", overrides={}
        )

    def test_dedicated_linker_script_uses_cwd_config(self, tmp_path: Path, monkeypatch) -> None:
        from sound_send_tooling.cli.toolchain_cmd import link_x86_64_pc_windows_gnu

        monkeypatch.chdir(tmp_path)
        self._mingw_override(tmp_path)
        which, version = self._only_on_path("x86_64-w64-mingw32-gcc", "my-mingw-gcc")
        with (
            patch("sys.argv", ["sound-send-link-x86_64-pc-windows-gnu", "-o", "app.exe", "a.o"]),
            patch(
                "sound_send_tooling.toolchain.proxy.detect_host_platform",
                return_value=LINUX_X86_64_HOST,
            ),
            which,
            version,
            patch(
                "sound_send_tooling.toolchain.proxy.run_command",
                return_value=MagicMock(returncode=0),
            ) as m_link,
            pytest.raises(SystemExit) as e,
        ):
            link_x86_64_pc_windows_gnu()
        assert e.value.code == 0
        (cmd,) = m_link.call_args[0]
        assert cmd == ["my-mingw-gcc", "-o", "app.exe", "a.o"]

    def test_dedicated_linker_script_uses_argv(self, tmp_path: Path, monkeypatch) -> None:
        from sound_send_tooling.cli.toolchain_cmd import link_aarch64_unknown_linux_gnu

        monkeypatch.chdir(tmp_path)
        with (
            patch("sys.argv", ["sound-send-link-aarch64-unknown-linux-gnu", "-shared", "x.o"]),
            patch("sound_send_tooling.cli.toolchain_cmd.run_proxy", return_value=0) as m_proxy,
            pytest.raises(SystemExit) as e,
        ):
            link_aarch64_unknown_linux_gnu()
        assert e.value.code == 0
        m_proxy.assert_called_once_with(
            "aarch64-unknown-linux-gnu", ["-shared", "x.o"], default_compiler="gcc", overrides={}
        )

    def test_linker_script_bad_config_exits_1(self, tmp_path: Path, monkeypatch, capsys) -> None:
        from sound_send_tooling.cli.toolchain_cmd import link_x86_64_unknown_linux_gnu

        monkeypatch.chdir(tmp_path)
        (tmp_path / "sound-send-tooling.yaml").write_text(
            "candidates:\n  x86_64-unknown-linux-gnu: clang\n"
        )
        with (
            patch("sys.argv", ["sound-send-link-x86_64-unknown-linux-gnu", "x.o"]),
            patch("sound_send_tooling.cli.toolchain_cmd.run_proxy") as m_proxy,
            pytest.raises(SystemExit) as e,
        ):
            link_x86_64_unknown_linux_gnu()
        assert e.value.code == 1
        m_proxy.assert_not_called()
        assert "candidates" in capsys.readouterr().err
