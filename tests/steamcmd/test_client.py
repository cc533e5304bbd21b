"""
Unit tests for high-level SteamCMD operations.

The process runner is mocked and fed captured SteamCMD output.
"""

from pathlib import Path
from unittest.mock import Mock, call, patch

import pytest

from steamcmdkit.core.exceptions import (
    AppInfoNotFoundError,
    InvalidInstallDirError,
    SteamCmdNotReadyError,
    SteamCmdUpdateError,
)
from steamcmdkit.steamcmd import client
from steamcmdkit.steamcmd.client import (
    build_app_info_directives,
    build_app_info_warmup_directives,
    build_update_directives,
    get_app_info,
    prep,
    touch,
    update_app,
    wait_until_ready,
)
from steamcmdkit.steamcmd.runner import ProcessResult

INSTALL_DIR = str(Path("/srv/steamworks").resolve())


def _result(stdout: str = "", returncode: int = 0) -> ProcessResult:
    return ProcessResult(
        args=["steamcmd.sh"], returncode=returncode, stdout=stdout, stderr=""
    )


def _app_updates(directives) -> int:
    return sum(1 for d in directives if d[0] == "app_update")


class TestTouch:
    """Test touch function."""

    @patch("steamcmdkit.steamcmd.client.run")
    def test_touch_runs_empty_batch(self, mock_run, steamcmd_config):
        """Test touch runs SteamCMD with no directives."""
        mock_run.return_value = _result()

        touch(steamcmd_config)

        mock_run.assert_called_once_with([], steamcmd_config)


class TestWaitUntilReady:
    """Test wait_until_ready function."""

    def test_ready_when_launcher_exists(self, installed_steamcmd):
        with patch(
            "steamcmdkit.steamcmd.installer.detect_os", return_value="linux"
        ), patch("steamcmdkit.steamcmd.client.time.sleep") as mock_sleep:
            wait_until_ready(installed_steamcmd)

        mock_sleep.assert_not_called()

    def test_settle_delay_is_applied(self, installed_steamcmd):
        """Test the configured settle delay is slept once ready."""
        config = installed_steamcmd.with_overrides(settle_delay=0.25)

        with patch(
            "steamcmdkit.steamcmd.installer.detect_os", return_value="linux"
        ), patch("steamcmdkit.steamcmd.client.time.sleep") as mock_sleep:
            wait_until_ready(config)

        mock_sleep.assert_called_once_with(0.25)

    def test_not_ready_times_out(self, steamcmd_config):
        """Test a missing launcher raises after ready_timeout."""
        config = steamcmd_config.with_overrides(ready_timeout=0.2)

        with patch("steamcmdkit.steamcmd.installer.detect_os", return_value="linux"):
            with pytest.raises(SteamCmdNotReadyError):
                wait_until_ready(config)


class TestPrep:
    """Test prep function."""

    def test_prep_order(self, steamcmd_config):
        """Test prep installs, waits for readiness, then touches."""
        manager = Mock()

        with patch.object(
            client.SteamCmdInstaller, "ensure_present", manager.ensure_present
        ), patch.object(client, "wait_until_ready", manager.wait_until_ready), patch(
            "steamcmdkit.steamcmd.client.run", manager.run
        ):
            prep(steamcmd_config)

        assert manager.mock_calls == [
            call.ensure_present(),
            call.wait_until_ready(steamcmd_config),
            call.run([], steamcmd_config),
        ]


class TestGetAppInfo:
    """Test get_app_info function."""

    def test_warmup_directives(self):
        directives = build_app_info_warmup_directives(730)

        assert directives == [
            ("@ShutdownOnFailedCommand", "0"),
            ("login", "anonymous"),
            ("app_info_print", "730"),
            ("force_install_dir", "./4"),
            ("app_update", "4"),
        ]

    def test_info_directives(self):
        directives = build_app_info_directives(730)

        assert directives == [
            ("@ShutdownOnFailedCommand", "0"),
            ("login", "anonymous"),
            ("app_info_update", "1"),
            ("app_info_print", "730"),
            ("find", "e"),
        ]

    @patch("steamcmdkit.steamcmd.client.run")
    def test_get_app_info(self, mock_run, steamcmd_config, read_output):
        """Test the warm-up batch runs before the info batch is parsed."""
        mock_run.side_effect = [
            _result("warm-up output"),
            _result(read_output("app_info_730.txt")),
        ]

        info = get_app_info(730, steamcmd_config)

        assert info["common"]["name"] == "Counter-Strike: Global Offensive"
        assert info["ufs"]
        assert mock_run.call_args_list == [
            call(build_app_info_warmup_directives(730), steamcmd_config),
            call(build_app_info_directives(730), steamcmd_config),
        ]

    @patch("steamcmdkit.steamcmd.client.run")
    def test_repeated_calls(self, mock_run, steamcmd_config, read_output):
        """Test repeated calls for the same app return equal mappings."""
        mock_run.return_value = _result(read_output("app_info_730.txt"))

        first = get_app_info(730, steamcmd_config)
        second = get_app_info(730, steamcmd_config)

        assert first == second

    @patch("steamcmdkit.steamcmd.client.run")
    def test_app_not_in_output(self, mock_run, steamcmd_config):
        mock_run.return_value = _result("No app info for AppID 12 found\n")

        with pytest.raises(AppInfoNotFoundError):
            get_app_info(12, steamcmd_config)


class TestBuildUpdateDirectives:
    """Test build_update_directives function."""

    def test_regular_app_updates_once(self):
        directives = build_update_directives(1007, INSTALL_DIR)

        assert directives == [
            ("@ShutdownOnFailedCommand", "0"),
            ("login", "anonymous"),
            ("force_install_dir", INSTALL_DIR),
            ("app_update", "1007"),
        ]

    @pytest.mark.parametrize("app_id", [90, "90"])
    def test_hlds_updates_twice(self, app_id):
        """Test HLDS gets a second app_update pass."""
        directives = build_update_directives(app_id, INSTALL_DIR)

        assert _app_updates(directives) == 2

    @pytest.mark.parametrize("app_id", [4, 740, 1007, "1007"])
    def test_other_apps_update_once(self, app_id):
        assert _app_updates(build_update_directives(app_id, INSTALL_DIR)) == 1

    def test_install_dir_with_spaces(self, tmp_path):
        install_dir = tmp_path / "my server"

        directives = build_update_directives(1007, install_dir)

        assert ("force_install_dir", str(install_dir)) in directives

    @pytest.mark.parametrize("install_dir", ["bad_steamworks", "./hlds", "../x"])
    def test_relative_install_dir(self, install_dir):
        with pytest.raises(InvalidInstallDirError):
            build_update_directives(1007, install_dir)


class TestUpdateApp:
    """Test update_app function."""

    @patch("steamcmdkit.steamcmd.client.run")
    def test_relative_path_never_spawns(self, mock_run, steamcmd_config):
        """Test a relative install dir fails before SteamCMD is started."""
        with pytest.raises(TypeError):
            update_app(1007, "bad_steamworks", steamcmd_config)

        mock_run.assert_not_called()

    @patch("steamcmdkit.steamcmd.client.run")
    def test_fully_installed_returns_true(
        self, mock_run, steamcmd_config, read_output
    ):
        mock_run.return_value = _result(read_output("update_installed.txt"))

        assert update_app(1007, INSTALL_DIR, steamcmd_config) is True
        mock_run.assert_called_once_with(
            build_update_directives(1007, INSTALL_DIR), steamcmd_config
        )

    @patch("steamcmdkit.steamcmd.client.run")
    def test_already_up_to_date_returns_false(
        self, mock_run, steamcmd_config, read_output
    ):
        mock_run.return_value = _result(read_output("update_up_to_date.txt"))

        assert update_app(1007, INSTALL_DIR, steamcmd_config) is False

    @patch("steamcmdkit.steamcmd.client.run")
    def test_unrecognized_output_raises(self, mock_run, steamcmd_config, read_output):
        """Test the SteamCMD error line is surfaced in the exception."""
        mock_run.return_value = _result(read_output("update_no_subscription.txt"))

        with pytest.raises(SteamCmdUpdateError) as exc_info:
            update_app(4, INSTALL_DIR, steamcmd_config)

        error = exc_info.value
        assert "ERROR! Failed to install app '4' (No subscription)" in str(error)
        assert error.reason == "ERROR! Failed to install app '4' (No subscription)"
        assert error.app_id == 4
        assert error.result is mock_run.return_value

    @patch("steamcmdkit.steamcmd.client.run")
    def test_inline_markers(self, mock_run, steamcmd_config):
        mock_run.return_value = _result("Success! App '42' fully installed\n")
        assert update_app(42, INSTALL_DIR, steamcmd_config) is True

        mock_run.return_value = _result("Success! App '42' already up to date.\n")
        assert update_app(42, INSTALL_DIR, steamcmd_config) is False
