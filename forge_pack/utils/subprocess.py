"""
Run the upstream build tools
"""
import logging
import shutil
import subprocess
from pathlib import Path
from typing import List, Union

from forge_pack.exceptions import UpstreamBuildFailed

LOGGER = logging.getLogger("ForgePack")


def run(cmd: List[str], cwd: Union[str, Path]) -> None:
    """Run a build command, forwarding its output to the logger

    Args:
        cmd (List[str]): command and arguments
        cwd (Union[str, Path]): working directory

    Raises:
        UpstreamBuildFailed: If the command is missing or returned an error
    """
    if shutil.which(cmd[0]) is None:
        raise UpstreamBuildFailed(f"{cmd[0]} not found. Is it installed and in the PATH?")

    LOGGER.info("'%s' running", " ".join(cmd))
    with subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE, cwd=cwd) as process:
        stdout_bytes, stderr_bytes = process.communicate()
        stdout, stderr = (
            stdout_bytes.decode(errors="backslashreplace"),
            stderr_bytes.decode(errors="backslashreplace"),
        )  # convert bytestrings to unicode strings

        if stdout:
            LOGGER.info(stdout)
        if process.returncode != 0:
            raise UpstreamBuildFailed(f"'{' '.join(cmd)}' failed:\n{stderr}")
        if stderr:
            LOGGER.error(stderr)
