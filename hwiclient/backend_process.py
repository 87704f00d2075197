import os
import subprocess

from . import decoder
from .backend import Backend, needs_device
from .commands import HWICommand, HWIFlag
from .exceptions import EncodingError, MissingDeviceError, ProcessError, failure

DEFAULT_BINARY = 'hwi'


class ProcessBackend(Backend):
    # Runs the hwi executable once per command.
    #
    # binary  - path of the executable, $HWI_BINARY or `hwi` on $PATH by default
    # timeout - seconds to wait for the device; the child is killed after that

    def __init__(self, binary=None, timeout=None):
        self.binary = binary or os.environ.get('HWI_BINARY', DEFAULT_BINARY)
        self.timeout = timeout

    def __repr__(self):
        return '<ProcessBackend: %s>' % self.binary

    def open(self, device, password=None, expert=False, chain=None):
        # Nothing to open, every command names its device with --fingerprint
        return self

    def execute(self, command):
        tokens = list(command)
        if needs_device(command) and '--fingerprint' not in tokens:
            raise MissingDeviceError('%s needs a device fingerprint' % command.subcommand)
        return self._run(tokens)

    def _run(self, tokens):
        try:
            proc = subprocess.run([self.binary] + tokens,
                                  stdin=subprocess.DEVNULL,
                                  stdout=subprocess.PIPE,
                                  stderr=subprocess.PIPE,
                                  timeout=self.timeout)
        except subprocess.TimeoutExpired as e:
            raise ProcessError('%s did not finish within %s seconds' % (self.binary, self.timeout)) from e
        except OSError as e:
            raise ProcessError('Failed to execute %s: %s' % (self.binary, e)) from e

        if proc.returncode != 0:
            # hwi reports its own errors as a failure object on stdout
            decoder.check_failure(proc.stdout.decode('utf-8', 'replace'))
            message = proc.stderr.decode('utf-8', 'replace').strip() or \
                proc.stdout.decode('utf-8', 'replace').strip()
            raise failure(None, message or '%s exited with status %d' % (self.binary, proc.returncode))

        try:
            return proc.stdout.decode('utf-8')
        except UnicodeDecodeError as e:
            raise EncodingError('Output of %s is not valid UTF-8: %s' % (self.binary, e)) from e

    def version(self):
        output = self.execute(HWICommand().add_flag(HWIFlag.version())).strip()
        # argparse prints "hwi 2.3.1"
        if output.startswith('hwi '):
            output = output[len('hwi '):]
        return output
