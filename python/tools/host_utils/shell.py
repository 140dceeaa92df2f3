#!/usr/bin/env python3
"""
Shell operations: hand files, folders and URLs to companion applications.

All launchers are fire-and-forget and report only whether the launch
succeeded.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import unquote

from loguru import logger

from .config import HostConfiguration
from .models import ProcessSpec, WaitPolicy, WindowStyle
from .platforms import PlatformProfile, get_platform_profile
from .process import ProcessRunner


class ShellLauncher:
    """Opens documents and folders in external tools."""

    def __init__(
        self,
        config: Optional[HostConfiguration] = None,
        profile: Optional[PlatformProfile] = None,
        runner: Optional[ProcessRunner] = None,
    ):
        self.config = config or HostConfiguration()
        self.profile = profile or get_platform_profile()
        self.runner = runner or ProcessRunner()

    def _launch(
        self,
        executable: str,
        arguments: Union[str, List[str]],
        window_style: WindowStyle = WindowStyle.NORMAL,
    ) -> bool:
        result = self.runner.run(
            ProcessSpec(
                executable=executable,
                arguments=arguments,
                wait=WaitPolicy.NO_WAIT,
                window_style=window_style,
            )
        )
        return not result.launch_failed

    def _open_image(self, image_file: str, exe: Optional[str], verb: str) -> bool:
        image_file = unquote(image_file)
        if exe:
            return self._launch(exe, [image_file])
        return self.profile.open_with_default_handler(image_file, verb)

    def open_image_in_editor(self, image_file: str) -> bool:
        """Open an image in the configured editor, else the OS edit handler."""
        return self._open_image(image_file, self.config.image_editor, "edit")

    def open_image_in_viewer(self, image_file: str) -> bool:
        """Open an image in the configured viewer, else the OS default viewer."""
        return self._open_image(image_file, self.config.image_viewer, "open")

    def open_terminal(self, folder: Union[str, Path]) -> bool:
        """Open the configured terminal in ``folder``."""
        arguments = self.config.terminal_command_args.format(folder)
        return self._launch(self.config.terminal_command, arguments)

    def open_file_in_explorer(self, path: Union[str, Path]) -> bool:
        """Open a folder, or reveal a file, in the platform file manager."""
        target = Path(path)
        if target.is_dir():
            return self.profile.open_with_default_handler(str(target))
        return self.profile.reveal_in_file_manager(target)

    def show_external_browser(self, url: str) -> HostConfiguration:
        """
        Open a URL in the configured preview browser.

        A configured browser that no longer exists is cleared and the URL is
        opened with the default browser instead.

        Returns:
            HostConfiguration: The configuration, updated if the browser
            setting was cleared.
        """
        browser = self.config.web_browser_preview_executable
        if not browser or not Path(browser).is_file():
            if browser:
                logger.warning(f"Preview browser {browser} not found, using default")
            self.config = self.config.model_copy(
                update={"web_browser_preview_executable": None}
            )
            self.profile.open_with_default_handler(url)
        else:
            self._launch(browser, [url])
        return self.config

    def open_git_client(self, folder: Union[str, Path]) -> bool:
        """Open the configured git GUI client on ``folder``."""
        exe = self.config.git.git_client_executable
        if not exe or not Path(exe).is_file():
            return False
        return self._launch(exe, [str(folder)])

    def optimize_png_image(
        self, png_file: Union[str, Path], level: int = 5
    ) -> bool:
        """
        Optimize a png in the background with optipng.

        Args:
            png_file: Image to optimize in place.
            level: optipng optimization level from 1-7.
        """
        level = max(1, min(7, level))
        return self._launch(
            self.profile.optipng_executable,
            [f"-o{level}", str(png_file)],
            window_style=WindowStyle.HIDDEN,
        )
