import sys
import threading

from . import decoder
from . import mapping
from .backend_embedded import DEFAULT_UDEV_LOCATION
from .backend_process import ProcessBackend
from .commands import HWICommand
from .exceptions import DeviceNotFoundException
from .messages import AddressType, Chain, Subcommand
from .messages.Descriptor import descriptor_type


def log(msg):
    sys.stderr.write("%s\n" % msg)
    sys.stderr.flush()


def default_backend():
    return ProcessBackend()


class expect(object):
    # Decorator decodes the raw response of the wrapped method
    # into the expected message, or a list of them when `many` is set.
    # Failure objects printed by HWI are raised as exceptions.
    def __init__(self, expected, many=False):
        self.expected = mapping.get_class(expected)
        self.many = many

    def __call__(self, f):
        def wrapped_f(*args, **kwargs):
            ret = f(*args, **kwargs)
            if self.many:
                return decoder.deserialize_list(ret, self.expected)
            return decoder.deserialize(ret, self.expected)
        return wrapped_f


def status(f):
    # Decorator checks the {"success": ...} response of a
    # device lifecycle command and returns nothing
    def wrapped_f(*args, **kwargs):
        decoder.check_status(f(*args, **kwargs))
    return wrapped_f


def session(f):
    # Decorator wraps a BaseClient method with the client lock,
    # the device serves one command at a time
    def wrapped_f(*args, **kwargs):
        client = args[0]
        with client.lock:
            return f(*args, **kwargs)
    return wrapped_f


class BaseClient(object):
    # Implements very basic layer of building HWI commands for one
    # device and getting the raw response text back.
    def __init__(self, backend, device, expert=False, chain=Chain.Main, password=None, **kwargs):
        self.backend = backend
        self.device = device
        self.expert = expert
        self.chain = chain
        self.password = password
        self.lock = threading.RLock()
        super(BaseClient, self).__init__()

    def __repr__(self):
        return '<%s: %s %s>' % (self.__class__.__name__, self.device.device_type,
                                self.device.fingerprint)

    def _command(self, subcommand, expert=None):
        # Global flags, then the subcommand; operation arguments follow
        command = HWICommand()
        command.add_fingerprint(self.device.fingerprint)
        command.add_chain(self.chain)
        command.add_expert(self.expert if expert is None else expert)
        command.add_password(self.password)
        return command.add_subcommand(subcommand)

    @session
    def call_raw(self, command):
        return self.backend.execute(command)

    def close(self):
        self.backend.close()

    def __enter__(self):
        return self

    def __exit__(self, _type, value, traceback):
        self.close()
        return False


class DebugCommandMixin(object):
    def call_raw(self, command):
        log("SENDING %r" % (command, ))
        resp = super(DebugCommandMixin, self).call_raw(command)
        log("RECEIVED %s" % resp.strip())
        return resp


class ProtocolMixin(object):

    def __init__(self, *args, **kwargs):
        super(ProtocolMixin, self).__init__(*args, **kwargs)

    # Operations without a device.

    @classmethod
    def enumerate(cls, backend=None, password=None):
        '''List connected devices.

        Returns one entry per device HWI reports: a Device message, or the
        exception describing why that device could not be used.
        '''
        backend = backend or default_backend()
        command = HWICommand().add_password(password).add_subcommand(Subcommand.Enumerate)
        return decoder.deserialize_devices(backend.execute(command))

    @classmethod
    def get_client(cls, device, expert=False, chain=Chain.Main, password=None, backend=None):
        backend = backend or default_backend()
        handle = backend.open(device, password=password, expert=expert, chain=chain)
        return cls(handle, device, expert=expert, chain=chain, password=password)

    @classmethod
    def find_device(cls, password=None, device_type=None, fingerprint=None,
                    expert=False, chain=Chain.Main, backend=None):
        backend = backend or default_backend()
        for device in cls.enumerate(backend, password):
            if isinstance(device, Exception):
                continue
            if device_type is not None and device.device_type != device_type:
                continue
            if fingerprint is not None and device.fingerprint != fingerprint:
                continue
            return cls.get_client(device, expert=expert, chain=chain,
                                  password=password, backend=backend)
        raise DeviceNotFoundException(None, 'No matching device found')

    @classmethod
    def get_version(cls, backend=None):
        return (backend or default_backend()).version()

    @classmethod
    def install_udev_rules(cls, source=None, location=None, backend=None):
        backend = backend or default_backend()
        command = HWICommand().add_subcommand(Subcommand.InstallUdevRules)
        if source is not None:
            command.add_source(source)
        command.add_location(location or DEFAULT_UDEV_LOCATION)
        decoder.check_status(backend.execute(command))

    @classmethod
    def set_log_level(cls, level, backend=None):
        (backend or default_backend()).set_log_level(level)

    @classmethod
    def install_hwilib(cls, version=None, backend=None):
        (backend or default_backend()).install_hwilib(version)

    # Keys and signing.

    @session
    @expect('ExtendedPubKey')
    def get_master_xpub(self, address_type=AddressType.Wit, account=0):
        command = self._command(Subcommand.GetMasterXpub)
        command.add_address_type(address_type)
        command.add_account(account)
        return self.call_raw(command)

    @session
    @expect('ExtendedPubKey')
    def get_xpub(self, path, expert=False):
        command = self._command(Subcommand.GetXpub, expert=expert)
        command.add_path(path)
        return self.call_raw(command)

    @session
    @expect('Signature')
    def sign_message(self, message, path):
        command = self._command(Subcommand.SignMessage)
        command.add_end_of_options()
        command.add_message(message)
        command.add_path(path)
        return self.call_raw(command)

    @session
    @expect('PartiallySignedTransaction')
    def sign_tx(self, psbt):
        command = self._command(Subcommand.SignTx)
        command.add_psbt(psbt)
        return self.call_raw(command)

    @session
    @expect('KeyPoolElement', many=True)
    def get_keypool(self, keypool=True, internal=False, address_type=AddressType.Wit,
                    addr_all=False, account=None, path=None, start=0, end=1000):
        command = self._command(Subcommand.GetKeypool)
        command.add_keypool(keypool)
        command.add_internal(internal)
        command.add_address_type(address_type)
        command.add_addr_all(addr_all)
        if account is not None:
            command.add_account(account)
        if path is not None:
            command.add_path(path, with_flag=True, with_star=True)
        command.add_start_end(start, end)
        return self.call_raw(command)

    @session
    def get_descriptors(self, account=None, parser=str):
        command = self._command(Subcommand.GetDescriptors)
        if account is not None:
            command.add_account(account)
        return decoder.deserialize(self.call_raw(command), descriptor_type(parser))

    @session
    @expect('Address')
    def display_address_with_desc(self, descriptor):
        command = self._command(Subcommand.DisplayAddress)
        command.add_descriptor(descriptor)
        return self.call_raw(command)

    @session
    @expect('Address')
    def display_address_with_path(self, path, address_type=AddressType.Wit):
        command = self._command(Subcommand.DisplayAddress)
        command.add_path(path, with_flag=True)
        command.add_address_type(address_type)
        return self.call_raw(command)

    # Device lifecycle.

    @session
    @status
    def setup_device(self, label='', passphrase=''):
        command = self._command(Subcommand.Setup)
        command.add_label(label)
        command.add_backup_passphrase(passphrase)
        return self.call_raw(command)

    @session
    @status
    def restore_device(self, label='', word_count=24):
        command = self._command(Subcommand.Restore)
        command.add_word_count(word_count)
        command.add_label(label)
        return self.call_raw(command)

    @session
    @status
    def backup_device(self, label='', backup_passphrase=''):
        command = self._command(Subcommand.Backup)
        command.add_label(label)
        command.add_backup_passphrase(backup_passphrase)
        return self.call_raw(command)

    @session
    @status
    def wipe_device(self):
        return self.call_raw(self._command(Subcommand.Wipe))

    @session
    @status
    def toggle_passphrase(self):
        return self.call_raw(self._command(Subcommand.TogglePassphrase))

    @session
    @status
    def prompt_pin(self):
        return self.call_raw(self._command(Subcommand.PromptPin))

    @session
    @status
    def send_pin(self, pin):
        command = self._command(Subcommand.SendPin)
        command.add_pin(pin)
        return self.call_raw(command)


class HWIClient(ProtocolMixin, BaseClient):
    pass


class HWIClientDebug(ProtocolMixin, DebugCommandMixin, BaseClient):
    pass
