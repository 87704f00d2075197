from .exceptions import failure
from .messages import ErrorCode, GLOBAL_SUBCOMMANDS

CAPABILITY_SET_LOG_LEVEL = 'set_log_level'
CAPABILITY_INSTALL_HWILIB = 'install_hwilib'


def needs_device(command):
    # Everything except enumerate, installudevrules and --version talks to one device
    return command.subcommand is not None and command.subcommand not in GLOBAL_SUBCOMMANDS


class Backend:
    # Executes HWI commands and returns the raw response text.
    # Subclasses differ only in how a command is run; responses have the
    # same JSON shape whichever backend produced them.

    CAPABILITIES = frozenset()

    def execute(self, command):
        raise NotImplementedError

    def open(self, device, password=None, expert=False, chain=None):
        # Return a backend bound to `device`, ready for per-device commands
        raise NotImplementedError

    def version(self):
        raise NotImplementedError

    def supports(self, capability):
        return capability in self.CAPABILITIES

    def set_log_level(self, level):
        raise failure(ErrorCode.NotImplemented,
                      '%s cannot set the log level' % self.__class__.__name__)

    def install_hwilib(self, version=None):
        raise failure(ErrorCode.NotImplemented,
                      '%s cannot install hwilib' % self.__class__.__name__)

    def close(self):
        pass
