"""Unit tests for the build toolchain executor."""

import logging
import subprocess

import pytest

from static_site_builder.build.executor import BuildConfig, BuildExecutor
from static_site_builder.core.exceptions import BuildError
from static_site_builder.core.process_runner import ProcessResult


class TestBuildExecutor:
    def test_runs_install_then_build(self, tmp_path, fake_runner, built_site):
        runner = fake_runner(outputs=built_site)

        output_dir = BuildExecutor(runner=runner).build(tmp_path)

        assert runner.calls == [
            ["npm", "install", "--force"],
            ["npm", "run", "build"],
        ]
        assert output_dir == tmp_path / "dist"
        assert sorted(p.name for p in output_dir.iterdir()) == sorted(built_site)

    def test_custom_commands_and_output_dir(self, tmp_path, fake_runner):
        runner = fake_runner(outputs={"index.html": b"<html>"}, output_dir="www")
        config = BuildConfig(
            install_command=("yarn", "install"),
            build_command=("yarn", "build"),
            output_dir="www",
        )

        output_dir = BuildExecutor(config, runner=runner).build(tmp_path)

        assert runner.calls == [["yarn", "install"], ["yarn", "build"]]
        assert output_dir == tmp_path / "www"

    def test_install_failure_stops_before_build(self, tmp_path, fake_runner):
        runner = fake_runner(
            fail_on="install", exit_code=254, stderr="npm ERR! code ENOENT\n"
        )

        with pytest.raises(BuildError) as exc_info:
            BuildExecutor(runner=runner).build(tmp_path)

        assert runner.calls == [["npm", "install", "--force"]]
        assert exc_info.value.exit_code == 254
        assert exc_info.value.command == ["npm", "install", "--force"]

    def test_build_failure_carries_raw_stderr(self, tmp_path, fake_runner):
        stderr = "Error: src/app/app.module.ts:3:1 - error TS2307: Cannot find module\n"
        runner = fake_runner(fail_on="build", exit_code=1, stderr=stderr, stdout="> ng build\n")

        with pytest.raises(BuildError) as exc_info:
            BuildExecutor(runner=runner).build(tmp_path)

        error = exc_info.value
        assert error.exit_code == 1
        assert error.stderr == stderr
        assert error.stdout == "> ng build\n"
        assert stderr in str(error)
        assert error.stage == "build"

    def test_missing_output_directory_is_fatal(self, tmp_path, fake_runner):
        runner = fake_runner(outputs=None)

        with pytest.raises(BuildError, match="'dist' was not produced"):
            BuildExecutor(runner=runner).build(tmp_path)

    def test_timeout_is_build_error(self, tmp_path):
        class SlowRunner:
            def invoke(self, command, cwd, timeout=None):
                raise subprocess.TimeoutExpired(cmd=list(command), timeout=timeout)

        executor = BuildExecutor(BuildConfig(timeout=5), runner=SlowRunner())

        with pytest.raises(BuildError, match="timed out after 5 seconds"):
            executor.build(tmp_path)

    def test_missing_toolchain_is_build_error(self, tmp_path):
        class NoNpmRunner:
            def invoke(self, command, cwd, timeout=None):
                raise FileNotFoundError(2, "No such file or directory", command[0])

        with pytest.raises(BuildError, match="npm not found") as exc_info:
            BuildExecutor(runner=NoNpmRunner()).build(tmp_path)

        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_runs_in_tree_root(self, tmp_path):
        seen = []

        class RecordingRunner:
            def invoke(self, command, cwd, timeout=None):
                seen.append((cwd, timeout))
                (cwd / "dist").mkdir(exist_ok=True)
                return ProcessResult(command=command, exit_code=0)

        BuildExecutor(BuildConfig(timeout=30), runner=RecordingRunner()).build(tmp_path)

        assert seen == [(tmp_path, 30), (tmp_path, 30)]

    def test_toolchain_output_is_logged(self, tmp_path, caplog):
        class ChattyRunner:
            def invoke(self, command, cwd, timeout=None):
                (cwd / "dist").mkdir(exist_ok=True)
                return ProcessResult(
                    command=command,
                    exit_code=0,
                    stdout=f"> {' '.join(command)}\nadded 912 packages in 41s\n",
                )

        with caplog.at_level(logging.INFO, logger="static_site_builder.build.executor"):
            BuildExecutor(runner=ChattyRunner()).build(tmp_path)

        assert "npm install --force output:\n> npm install --force" in caplog.text
        assert "added 912 packages in 41s" in caplog.text
        assert "npm run build output:" in caplog.text
