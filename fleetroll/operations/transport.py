"""Command transport: run shell commands locally or on a server over SSH."""

import asyncio
import logging

logger = logging.getLogger(__name__)


def ssh_base_args(address, ssh_key, ssh_port):
    """Build base SSH arguments."""
    args = [
        "ssh",
        "-o", "StrictHostKeyChecking=no",
        "-o", "UserKnownHostsFile=/dev/null",
        "-o", "BatchMode=yes",
        "-o", "ServerAliveInterval=60",
        "-o", "ServerAliveCountMax=5",
    ]
    if ssh_key:
        args += ["-i", ssh_key]
    if ssh_port and ssh_port != 22:
        args += ["-p", str(ssh_port)]
    args.append(address)
    return args


async def _collect(proc, command, timeout, log):
    stdout_lines, stderr_lines = [], []

    async def _read_stream(pipe, lines, level):
        async for raw_line in pipe:
            line = raw_line.decode(errors="replace").rstrip("\n")
            log.log(level, line)
            lines.append(line)

    try:
        await asyncio.wait_for(
            asyncio.gather(
                _read_stream(proc.stdout, stdout_lines, logging.INFO),
                _read_stream(proc.stderr, stderr_lines, logging.ERROR),
                proc.wait(),
            ),
            timeout=timeout,
        )
    except TimeoutError:
        log.error(f"Command timed out after {timeout}s: {command}")
        proc.kill()
        await proc.wait()
        return 1, "\n".join(stdout_lines), f"timed out after {timeout}s"
    return proc.returncode, "\n".join(stdout_lines), "\n".join(stderr_lines)


async def run_local(command, timeout=None, log=None):
    """Run a shell command on the control host.

    Returns:
        (returncode, stdout, stderr) tuple. Output lines are logged as they arrive.
        A timeout or a failure to start the process gives returncode 1.
    """
    log = log or logger
    try:
        proc = await asyncio.create_subprocess_shell(
            command,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        log.error(f"Error running command: {e}")
        return 1, "", str(e)
    return await _collect(proc, command, timeout, log)


async def run_remote(server, command, timeout=None, log=None):
    """Run a command on ``server`` (a ServerTarget) over SSH.

    Returns:
        (returncode, stdout, stderr) tuple.
    """
    log = log or logger
    args = ssh_base_args(server.address, server.ssh_key, server.ssh_port)
    args.append(command)
    try:
        proc = await asyncio.create_subprocess_exec(
            *args,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        log.error(f"Error running SSH command: {e}")
        return 1, "", str(e)
    return await _collect(proc, command, timeout, log)
