"""
Tests for CLI commands — global options, create, and the toolchain
commands (build, run, job, init).
"""

import shutil
import subprocess
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from aurora.core.services.go_ops import ToolError
from aurora.main import cli
from tests.helpers import TEMPLATE_MODULE


def _write_settings(tmp_path: Path, template_repo: Path, go: str) -> Path:
    config = tmp_path / "aurora.yml"
    config.write_text(textwrap.dedent(f"""\
        template:
          url: {template_repo.as_uri()}
          module: {TEMPLATE_MODULE}
        toolchain:
          go: {go}
    """))
    return config


@pytest.fixture
def go_ok() -> str:
    path = shutil.which("true")
    if path is None:
        pytest.skip("no 'true' executable")
    return path


@pytest.fixture
def go_fail() -> str:
    path = shutil.which("false")
    if path is None:
        pytest.skip("no 'false' executable")
    return path


@pytest.fixture
def project(tmp_path: Path, monkeypatch) -> Path:
    """A generated project's root with the usual files, as the CWD."""
    root = tmp_path / "svc"
    (root / "configs").mkdir(parents=True)
    (root / "main.go").write_text("package main\n")
    (root / "go.mod").write_text("module svc\n")
    (root / "configs" / "config.local.yaml").write_text("env: local\ndata: {}\n")
    (root / "configs" / "config.dev.yaml").write_text("env: dev\n")
    monkeypatch.chdir(root)
    monkeypatch.delenv("AURORA_CONFIG", raising=False)
    return root.resolve()


def _ok(args, **kwargs):
    return subprocess.CompletedProcess(args=args, returncode=0, stdout="", stderr="")


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Aurora" in result.output
        for command in ("create", "build", "run", "job", "init", "gen-model"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "aurora" in result.output
        assert "0.1.0" in result.output

    def test_missing_explicit_config(self, tmp_path: Path):
        result = CliRunner().invoke(cli, ["--config", str(tmp_path / "nope.yml"), "build"])
        assert result.exit_code == 1
        assert "❌" in result.output
        assert "not found" in result.output

    def test_invalid_config(self, tmp_path: Path):
        config = tmp_path / "aurora.yml"
        config.write_text("template: [not, a, mapping]\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "build"])
        assert result.exit_code == 1
        assert "Invalid settings" in result.output


# ═══════════════════════════════════════════════════════════════════
#  create
# ═══════════════════════════════════════════════════════════════════


class TestCreateCommand:
    def test_create_with_arguments(self, tmp_path, template_repo, workspace, go_ok):
        config = _write_settings(tmp_path, template_repo, go_ok)
        result = CliRunner().invoke(
            cli, ["--config", str(config), "create", "billing", "--path", str(workspace)],
            input="n\n",
        )

        assert result.exit_code == 0, result.output
        assert "created successfully" in result.output
        assert "git remote add origin" in result.output
        assert "git push -u origin main" in result.output
        assert 'import "billing/cmd"' in (workspace / "billing" / "main.go").read_text()

    def test_create_interactive(self, tmp_path, template_repo, workspace, go_ok):
        config = _write_settings(tmp_path, template_repo, go_ok)
        result = CliRunner().invoke(
            cli, ["--config", str(config), "create"],
            input=f"billing\n{workspace}\ny\n",
        )

        assert result.exit_code == 0, result.output
        assert (workspace / "billing" / "internal" / "app" / "demo.go").is_file()

    def test_create_demo_flag(self, tmp_path, template_repo, workspace, go_ok):
        config = _write_settings(tmp_path, template_repo, go_ok)
        result = CliRunner().invoke(
            cli,
            ["--config", str(config), "create", "billing", "-p", str(workspace), "--with.demo"],
        )

        assert result.exit_code == 0, result.output
        assert "(demo)" in result.output
        assert (workspace / "billing" / "internal" / "app" / "demo.go").is_file()

    def test_decline_overwrite(self, tmp_path, template_repo, workspace, go_ok):
        config = _write_settings(tmp_path, template_repo, go_ok)
        target = workspace / "billing"
        target.mkdir()
        (target / "keep.txt").write_text("mine")

        result = CliRunner().invoke(
            cli, ["--config", str(config), "create", "billing", "-p", str(workspace)],
            input="n\nn\n",
        )

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert result.output.count("❌") == 1
        assert (target / "keep.txt").read_text() == "mine"

    def test_accept_overwrite(self, tmp_path, template_repo, workspace, go_ok):
        config = _write_settings(tmp_path, template_repo, go_ok)
        target = workspace / "billing"
        target.mkdir()
        (target / "old.txt").write_text("stale")

        result = CliRunner().invoke(
            cli, ["--config", str(config), "create", "billing", "-p", str(workspace)],
            input="n\ny\n",
        )

        assert result.exit_code == 0, result.output
        assert not (target / "old.txt").exists()

    def test_tool_failure_reports_once_and_cleans_up(
        self, tmp_path, template_repo, workspace, go_fail
    ):
        config = _write_settings(tmp_path, template_repo, go_fail)
        result = CliRunner().invoke(
            cli, ["--config", str(config), "create", "billing", "-p", str(workspace)],
            input="n\n",
        )

        assert result.exit_code == 1
        assert result.output.count("❌") == 1
        assert not (workspace / "billing").exists()

    def test_stage_progress_printed(self, tmp_path, template_repo, workspace, go_ok):
        config = _write_settings(tmp_path, template_repo, go_ok)
        result = CliRunner().invoke(
            cli, ["--config", str(config), "create", "billing", "-p", str(workspace)],
            input="n\n",
        )
        assert "Pulling the template repository" in result.output
        assert "go.mod" in result.output

    def test_name_only_asks_for_path_and_demo(
        self, tmp_path, template_repo, workspace, go_ok
    ):
        config = _write_settings(tmp_path, template_repo, go_ok)
        result = CliRunner().invoke(
            cli, ["--config", str(config), "create", "billing"],
            input=f"{workspace}\ny\n",
        )

        assert result.exit_code == 0, result.output
        assert "Enter a name" not in result.output
        assert "Enter the project path" in result.output
        assert "Include the demo code?" in result.output
        assert (workspace / "billing" / "internal" / "app" / "demo.go").is_file()

    def test_path_prompt_defaults_to_cwd(
        self, tmp_path, template_repo, workspace, go_ok, monkeypatch
    ):
        config = _write_settings(tmp_path, template_repo, go_ok)
        monkeypatch.chdir(workspace)
        result = CliRunner().invoke(
            cli, ["--config", str(config), "create", "billing"],
            input="\nn\n",
        )

        assert result.exit_code == 0, result.output
        assert (workspace / "billing" / "main.go").is_file()
        assert not (workspace / "billing" / "internal" / "app" / "demo.go").exists()

    def test_flags_skip_the_prompts(self, tmp_path, template_repo, workspace, go_ok):
        config = _write_settings(tmp_path, template_repo, go_ok)
        result = CliRunner().invoke(
            cli,
            ["--config", str(config), "create", "billing", "-p", str(workspace), "--with-demo"],
        )

        assert result.exit_code == 0, result.output
        assert "Enter the project path" not in result.output
        assert "Include the demo code?" not in result.output

    def test_home_lookup_failure_is_not_fatal(
        self, tmp_path, template_repo, workspace, go_ok, monkeypatch
    ):
        def _no_home():
            raise RuntimeError("Could not determine home directory.")

        config = _write_settings(tmp_path, template_repo, go_ok)
        monkeypatch.setattr(Path, "home", staticmethod(_no_home))
        result = CliRunner().invoke(
            cli, ["--config", str(config), "create", "~/app", "-p", str(workspace)],
            input="n\n",
        )

        assert result.exit_code == 0, result.output
        assert "⚠️" in result.output
        assert "home directory" in result.output
        assert (workspace / "~" / "app" / "main.go").is_file()


# ═══════════════════════════════════════════════════════════════════
#  build / run / job / init
# ═══════════════════════════════════════════════════════════════════


class TestBuildCommand:
    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_build_default(self, mock_run, project: Path):
        result = CliRunner().invoke(cli, ["build"])

        assert result.exit_code == 0, result.output
        args = mock_run.call_args[0][0]
        assert args == [
            "go", "build", "-ldflags=-s -w",
            "-o", str(project / "bin" / "server"), str(project / "main.go"),
        ]
        assert (project / "bin").is_dir()

    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_build_custom_output(self, mock_run, project: Path):
        result = CliRunner().invoke(cli, ["build", "-o", "out/app"])
        assert result.exit_code == 0, result.output
        assert str(project / "out" / "app") in mock_run.call_args[0][0]

    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_build_explicit_main(self, mock_run, project: Path):
        (project / "cmd").mkdir()
        (project / "cmd" / "tool.go").write_text("package main\n")
        result = CliRunner().invoke(cli, ["build", "cmd/tool.go"])
        assert result.exit_code == 0, result.output
        assert mock_run.call_args[0][0][-1] == str(project / "cmd" / "tool.go")

    def test_build_missing_main(self, project: Path):
        result = CliRunner().invoke(cli, ["build", "nope.go"])
        assert result.exit_code == 1
        assert "does not exist" in result.output

    def test_build_outside_project(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["build"])
        assert result.exit_code == 1
        assert "main.go" in result.output

    @patch("aurora.core.services.go_ops.run_tool", side_effect=ToolError("exit 2"))
    def test_build_failure(self, mock_run, project: Path):
        result = CliRunner().invoke(cli, ["build"])
        assert result.exit_code == 1
        assert "Build failed" in result.output


class TestRunCommand:
    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_run_defaults(self, mock_run, project: Path):
        result = CliRunner().invoke(cli, ["run"])

        assert result.exit_code == 0, result.output
        build_call, run_call = mock_run.call_args_list
        assert build_call[0][0][1] == "build"
        assert run_call[0][0] == [
            str(project / "bin" / "server"), "run",
            "-c", str(project / "configs" / "config.local.yaml"),
            "-e", "local",
        ]

    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_run_forwards_flags(self, mock_run, project: Path):
        result = CliRunner().invoke(
            cli, ["run", "-e", "dev", "--with-ws", "--with.cron", "--without-server", "--without.mq"]
        )

        assert result.exit_code == 0, result.output
        args = mock_run.call_args_list[-1][0][0]
        assert args[2:6] == ["-c", str(project / "configs" / "config.dev.yaml"), "-e", "dev"]
        assert args[6:] == ["--with.ws", "--with.cron", "--without.server", "--without.mq"]

    @pytest.mark.parametrize("alias", ["start", "up"])
    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_aliases(self, mock_run, alias, project: Path):
        result = CliRunner().invoke(cli, [alias])
        assert result.exit_code == 0, result.output
        assert mock_run.call_args_list[-1][0][0][1] == "run"

    def test_missing_config(self, project: Path):
        result = CliRunner().invoke(cli, ["run", "-e", "prod"])
        assert result.exit_code == 1
        assert "config.prod.yaml" in result.output

    def test_unknown_env(self, project: Path):
        result = CliRunner().invoke(cli, ["run", "-e", "staging"])
        assert result.exit_code == 2

    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_explicit_config(self, mock_run, project: Path):
        (project / "custom.yaml").write_text("data: {}\n")
        result = CliRunner().invoke(cli, ["run", "-c", "custom.yaml"])
        assert result.exit_code == 0, result.output
        assert str(project / "custom.yaml") in mock_run.call_args_list[-1][0][0]


class TestJobCommand:
    def _with_bin(self, project: Path) -> Path:
        binary = project / "bin" / "server"
        binary.parent.mkdir()
        binary.write_text("")
        return binary

    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_list_uses_existing_binary(self, mock_run, project: Path):
        binary = self._with_bin(project)
        result = CliRunner().invoke(cli, ["job", "--list"])

        assert result.exit_code == 0, result.output
        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == [str(binary), "job", "-l"]

    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_run_named_job(self, mock_run, project: Path):
        binary = self._with_bin(project)
        result = CliRunner().invoke(cli, ["job", "cleanup", "-p", "days=7"])

        assert result.exit_code == 0, result.output
        assert mock_run.call_args[0][0] == [str(binary), "job", "-n", "cleanup", "-p", "days=7"]

    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_builds_when_binary_missing(self, mock_run, project: Path):
        result = CliRunner().invoke(cli, ["job", "cleanup"])
        assert result.exit_code == 0, result.output
        assert [c[0][0][1] for c in mock_run.call_args_list] == ["build", "job"]

    def test_name_required(self, project: Path):
        result = CliRunner().invoke(cli, ["job"])
        assert result.exit_code == 1
        assert "name of the job" in result.output


class TestInitCommand:
    @patch("aurora.core.services.go_ops.run_tool", side_effect=_ok)
    def test_all_steps_succeed(self, mock_run, project: Path):
        result = CliRunner().invoke(cli, ["init"])

        assert result.exit_code == 0, result.output
        assert "initialized successfully" in result.output
        commands = [" ".join(c[0][0][1:]) for c in mock_run.call_args_list]
        assert commands[-2:] == ["mod tidy", "mod verify"]
        assert sum(c.startswith("install ") for c in commands) == 5

    def test_partial_success(self, project: Path):
        def flaky(args, **kwargs):
            if "verify" in args:
                raise ToolError("checksum mismatch")
            return _ok(args)

        with patch("aurora.core.services.go_ops.run_tool", side_effect=flaky):
            result = CliRunner().invoke(cli, ["init"])

        assert result.exit_code == 1
        assert "Partial success" in result.output
        assert "checksum mismatch" in result.output

    def test_requires_go_mod(self, project: Path):
        (project / "go.mod").unlink()
        result = CliRunner().invoke(cli, ["init"])
        assert result.exit_code == 1
        assert "go.mod" in result.output
