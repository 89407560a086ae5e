from __future__ import annotations

import logging
import pathlib
import subprocess
import time

logger = logging.getLogger(__file__)


class SubprocessExitCodeException(Exception):
    pass


def subprocess_run(
    args: list[str],
    cwd: pathlib.Path,
    env: dict[str, str] | None = None,
    timeout_s: float | None = 10.0,
    success_returncodes: list[int] | None = None,
    capture_output: bool = True,
) -> str | None:
    """
    Wrapper around 'subprocess.run()'

    capture_output=True: Return stdout.
    capture_output=False: stdout/stderr go to the terminal, return None.
    timeout_s=None: Wait till the subprocess terminates.
    """
    assert isinstance(args, list)
    assert isinstance(cwd, pathlib.Path)
    assert isinstance(env, dict | None)
    assert isinstance(timeout_s, float | None)
    assert isinstance(success_returncodes, list | None)
    if success_returncodes is None:
        success_returncodes = [0]

    if env is not None:
        for key, value in env.items():
            assert isinstance(key, str)
            assert isinstance(value, str)

    args_text = " ".join(args)

    if not capture_output:
        logger.debug(f"EXEC {args_text}")

    begin_s = time.monotonic()
    try:
        proc = subprocess.run(
            args=args,
            check=False,
            text=True,
            cwd=str(cwd),
            env=env,
            timeout=timeout_s,
            capture_output=capture_output,
        )
    except subprocess.TimeoutExpired as e:
        logger.info(f"EXEC {e!r}")
        raise
    except FileNotFoundError as e:
        raise SubprocessExitCodeException(
            f"EXEC failed, executable not found: {args_text}"
        ) from e

    def log(f) -> None:
        f(f"EXEC {args_text}")
        f(f"  cwd={cwd}")
        f(f"  returncode: {proc.returncode}")
        f(f"  success_codes: {success_returncodes}")
        f(f"  duration: {time.monotonic() - begin_s:0.3f}s")
        if capture_output:
            f(f"  stdout: {proc.stdout.strip()}")
            f(f"  stderr: {proc.stderr.strip()}")

    if proc.returncode not in success_returncodes:
        log(logger.warning)
        msg = f"EXEC failed with returncode={proc.returncode}: {args_text}"
        if capture_output:
            msg += f"\n{proc.stdout.strip()}\n{proc.stderr.strip()}"
        raise SubprocessExitCodeException(msg)

    log(logger.debug)

    if capture_output:
        return proc.stdout.strip()
    return None
