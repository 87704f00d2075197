import json
import logging
import os
import subprocess
import sys
import threading

from .backend import (Backend, CAPABILITY_INSTALL_HWILIB, CAPABILITY_SET_LOG_LEVEL,
                      needs_device)
from .exceptions import (DeviceNotFoundException, EmbeddedError, HWIError,
                         InvalidOptionError, MissingDeviceError, ProcessError,
                         failure)
from .messages import AddressType, Chain, ErrorCode, Subcommand

# hwilib keeps module level state (device caches, logging); every call into it
# from any EmbeddedBackend goes through this lock.
HWILIB_LOCK = threading.RLock()

DEFAULT_UDEV_LOCATION = '/etc/udev/rules.d/'

CLIENT = 'client'
OMIT = object()

# subcommand -> (hwilib.commands function, positional arguments)
CALLS = {
    Subcommand.Enumerate: ('enumerate', ('password', )),
    Subcommand.GetMasterXpub: ('getmasterxpub', (CLIENT, 'addr_type', 'account')),
    Subcommand.SignTx: ('signtx', (CLIENT, 'psbt')),
    Subcommand.GetXpub: ('getxpub', (CLIENT, 'path', 'expert')),
    Subcommand.SignMessage: ('signmessage', (CLIENT, 'message', 'path')),
    Subcommand.GetKeypool: ('getkeypool', (CLIENT, 'path', 'start', 'end', 'internal',
                                           'keypool', 'account', 'addr_type', 'addr_all')),
    Subcommand.GetDescriptors: ('getdescriptors', (CLIENT, 'account')),
    Subcommand.DisplayAddress: ('displayaddress', (CLIENT, 'path', 'desc', 'addr_type')),
    Subcommand.Setup: ('setup_device', (CLIENT, 'label', 'backup_passphrase')),
    Subcommand.Wipe: ('wipe_device', (CLIENT, )),
    Subcommand.Restore: ('restore_device', (CLIENT, 'label', 'word_count')),
    Subcommand.Backup: ('backup_device', (CLIENT, 'label', 'backup_passphrase')),
    Subcommand.PromptPin: ('prompt_pin', (CLIENT, )),
    Subcommand.SendPin: ('send_pin', (CLIENT, 'pin')),
    Subcommand.TogglePassphrase: ('toggle_passphrase', (CLIENT, )),
    Subcommand.InstallUdevRules: ('install_udev_rules', ('source', 'location')),
}

# Values used when the command did not set an option, as hwi's own CLI does.
# Keys missing here (psbt, message, start, end, pin) are required.
DEFAULTS = {
    'password': OMIT,
    'path': None,
    'desc': None,
    'addr_type': AddressType.Wit,
    'account': 0,
    'expert': False,
    'internal': False,
    'keypool': True,
    'addr_all': False,
    'label': '',
    'backup_passphrase': '',
    'word_count': 24,
    'location': DEFAULT_UDEV_LOCATION,
    'source': None,
}


class HWILib:
    # The hwilib objects the backend needs, resolved once per process.

    def __init__(self, commands, json_dumps=json.dumps, chain_type=None,
                 address_type=None, version=None, udev_source=None):
        self.commands = commands
        self.json_dumps = json_dumps
        self.Chain = chain_type
        self.AddressType = address_type
        self.version = version
        self.udev_source = udev_source

    @classmethod
    def initialize(cls):
        try:
            import hwilib
            from hwilib import commands
            from hwilib.common import AddressType as HWIAddressType
            from hwilib.common import Chain as HWIChain
        except ImportError as e:
            raise EmbeddedError('hwilib is not available: %s' % e) from e

        return cls(commands,
                   json_dumps=json.dumps,
                   chain_type=HWIChain,
                   address_type=HWIAddressType,
                   version=hwilib.__version__,
                   udev_source=os.path.join(os.path.dirname(hwilib.__file__), 'udev'))


_hwilib = None


def load_hwilib():
    global _hwilib
    with HWILIB_LOCK:
        if _hwilib is None:
            _hwilib = HWILib.initialize()
        return _hwilib


class EmbeddedBackend(Backend):
    # Calls hwilib.commands in this interpreter.
    #
    # Typed options of the command are handed to hwilib directly and the
    # returned object is serialised with json.dumps, so responses look
    # exactly like the output of the hwi executable.

    CAPABILITIES = frozenset([CAPABILITY_SET_LOG_LEVEL, CAPABILITY_INSTALL_HWILIB])

    def __init__(self, hwilib=None, hw_client=None, lock=None):
        self._hwilib = hwilib
        self.hw_client = hw_client
        self.lock = lock or HWILIB_LOCK

    def __repr__(self):
        return '<EmbeddedBackend: %s>' % ('bound' if self.hw_client is not None else 'unbound')

    @property
    def hwilib(self):
        if self._hwilib is None:
            self._hwilib = load_hwilib()
        return self._hwilib

    def _convert(self, key, value):
        if key == 'source' and value is None:
            return self.hwilib.udev_source
        if value is None:
            return None
        if key == 'addr_type':
            return self.hwilib.AddressType[value.value.upper()]
        if key == 'chain':
            return self.hwilib.Chain[value.value.upper()]
        if key == 'psbt':
            # hwilib.commands.signtx deserializes the base64 text itself
            return value.serialize()
        return value

    def _call(self, name, args):
        try:
            return getattr(self.hwilib.commands, name)(*args)
        except HWIError:
            raise
        except Exception as e:
            # hwilib.errors.HWWError and subclasses carry the HWI error code
            get_code = getattr(e, 'get_code', None)
            get_msg = getattr(e, 'get_msg', None)
            if callable(get_code) and callable(get_msg):
                raise failure(get_code(), get_msg()) from e
            raise EmbeddedError('%s: %s' % (e.__class__.__name__, e)) from e

    def open(self, device, password=None, expert=False, chain=Chain.Main):
        with self.lock:
            hw_client = self._call('get_client', (str(device.device_type), device.path,
                                                  password or '', expert,
                                                  self._convert('chain', chain or Chain.Main)))
        if hw_client is None:
            raise DeviceNotFoundException(ErrorCode.DeviceConnError,
                                          'device not found: %s' % device.fingerprint)
        return EmbeddedBackend(self.hwilib, hw_client, self.lock)

    def execute(self, command):
        with self.lock:
            if command.subcommand is None:
                if command.options.get('version'):
                    return self.hwilib.version
                raise InvalidOptionError('%r has no subcommand' % command)

            if needs_device(command) and self.hw_client is None:
                raise MissingDeviceError('%s needs an opened device' % command.subcommand)

            name, keys = CALLS[command.subcommand]
            args = []
            for key in keys:
                if key == CLIENT:
                    args.append(self.hw_client)
                    continue
                if key in command.options:
                    value = command.options[key]
                elif key in DEFAULTS:
                    value = DEFAULTS[key]
                else:
                    raise InvalidOptionError('%s needs the %s option' % (command.subcommand, key))
                if value is OMIT:
                    continue
                args.append(self._convert(key, value))

            output = self._call(name, args)
            return self.hwilib.json_dumps(output)

    def version(self):
        with self.lock:
            return self.hwilib.version

    def set_log_level(self, level):
        with self.lock:
            logging.basicConfig(level=level.value)
            logging.getLogger('hwilib').setLevel(level.value)

    def install_hwilib(self, version=None):
        if not version:
            requirement = 'hwi'
        elif version[0].isdigit():
            requirement = 'hwi==%s' % version
        else:
            requirement = version

        try:
            proc = subprocess.run([sys.executable, '-m', 'pip', 'install', '--user', requirement],
                                  stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as e:
            raise ProcessError('Failed to execute pip: %s' % e) from e
        if proc.returncode != 0:
            raise failure(None, 'Failed to install HWI: %s' %
                          proc.stderr.decode('utf-8', 'replace').strip())

    def close(self):
        with self.lock:
            if self.hw_client is not None:
                self.hw_client.close()
                self.hw_client = None
