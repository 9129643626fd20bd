"""Subprocess execution service for the ERPNext installer."""

import os
import shlex
import subprocess
from collections import deque
from typing import Deque, List, Sequence, Union

from erpnextinstaller.errors import ExternalCommandError
from erpnextinstaller.models import CommandSpec


class CommandResult:
    """Exit status and collected output of a finished command."""

    def __init__(self, args: List[str], returncode: int, output: str):
        self.args = args
        self.returncode = returncode
        self.output = output

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class CommandRunner:
    """Runs external commands with consistent logging and error handling."""

    TAIL_LINES = 20
    # shell convention for "command not found"
    NOT_FOUND = 127

    def __init__(self, logger, console=None, verbose: bool = False, subprocess_module=subprocess):
        self.logger = logger
        self.console = console
        self.verbose = verbose
        self.subprocess = subprocess_module

    @staticmethod
    def build_argv(spec: CommandSpec) -> List[str]:
        if spec.shell:
            script = spec.args[0]
        else:
            script = shlex.join(spec.args)

        if spec.user:
            if spec.cwd:
                script = f"cd {shlex.quote(spec.cwd)} && {script}"
            return ["sudo", "-u", spec.user, "-H", "bash", "-lc", script]

        if spec.shell:
            return ["bash", "-lc", script]
        return list(spec.args)

    def run(
        self,
        command: Union[CommandSpec, Sequence[str]],
        check: bool = True,
    ) -> CommandResult:
        spec = command if isinstance(command, CommandSpec) else CommandSpec(args=tuple(command))
        argv = self.build_argv(spec)
        cmd_str = spec.mask(" ".join(argv))
        if spec.description:
            self.logger.info(spec.description)
        self.logger.debug("Executing: %s", cmd_str)

        env = None
        if spec.env:
            env = dict(os.environ)
            env.update(spec.env)
        # sudo changes directory itself through the login-shell snippet
        cwd = None if spec.user else spec.cwd

        collected: List[str] = []
        tail: Deque[str] = deque(maxlen=self.TAIL_LINES)
        try:
            process = self.subprocess.Popen(
                argv,
                stdout=self.subprocess.PIPE,
                stderr=self.subprocess.STDOUT,
                stdin=self.subprocess.DEVNULL if spec.stdin is None else self.subprocess.PIPE,
                text=True,
                bufsize=1,
                cwd=cwd,
                env=env,
            )
        except FileNotFoundError as exc:
            message = f"Required command not found: {argv[0]}. Please install it and try again."
            if check:
                raise ExternalCommandError(message, command=argv, returncode=self.NOT_FOUND) from exc
            self.logger.warning("%s Continuing.", message)
            return CommandResult(argv, self.NOT_FOUND, "")
        except OSError as exc:
            raise ExternalCommandError(f"Failed to execute command: {cmd_str}. {exc}", command=argv) from exc

        if spec.stdin is not None and process.stdin:
            process.stdin.write(spec.stdin)
            process.stdin.close()

        if process.stdout:
            for line in process.stdout:
                cleaned = spec.mask(line.rstrip())
                if not cleaned:
                    continue
                collected.append(cleaned)
                tail.append(cleaned)
                self.logger.debug(cleaned)
                if self.verbose and self.console is not None:
                    self.console.print(cleaned, style="dim", markup=False, highlight=False)

        returncode = process.wait()

        result = CommandResult(argv, returncode, "\n".join(collected))
        if returncode == 0:
            return result

        message = f"Command failed ({returncode}): {cmd_str}"
        if tail:
            message = f"{message}\n" + "\n".join(tail)

        if check:
            raise ExternalCommandError(message, command=argv, returncode=returncode)

        self.logger.warning("Command failed (%s), continuing: %s", returncode, cmd_str)
        return result
