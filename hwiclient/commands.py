"""Construction of HWI command lines.

An HWICommand collects the argument vector for one HWI invocation together
with the typed value behind every argument. The subprocess backend runs the
tokens, the embedded backend calls hwilib with the typed values; both see the
same command.

Global flags come first, then the subcommand, then its arguments, because
that is the only order the hwi argument parser accepts. Callers add
arguments in the order HWI declares them; nothing is reordered here.
"""

from . import tools
from .exceptions import InvalidOptionError
from .messages import AddressType, Chain, Subcommand
from .types import PSBT, descriptor_to_string, psbt_from_base64

MASK = '***'


class HWIFlag:
    # One global option of the hwi executable.
    # `inline` flags carry caller text and are sent as a single --name=value
    # token so the text can never be read as another option.

    def __init__(self, name, value=None, option=None, inline=False, secret=False):
        self.name = name
        self.value = value
        self.option = option
        self.inline = inline
        self.secret = secret

    def tokens(self):
        if self.value is None:
            return ['--%s' % self.name]
        if self.inline:
            return ['--%s=%s' % (self.name, self.value)]
        return ['--%s' % self.name, str(self.value)]

    def __repr__(self):
        return '<HWIFlag: --%s>' % self.name

    @classmethod
    def device_path(cls, path):
        return cls('device-path', path, option='device_path', inline=True)

    @classmethod
    def device_type(cls, device_type):
        return cls('device-type', str(device_type), option='device_type')

    @classmethod
    def password(cls, password):
        return cls('password', password, option='password', inline=True, secret=True)

    @classmethod
    def fingerprint(cls, fingerprint):
        return cls('fingerprint', str(fingerprint), option='fingerprint')

    @classmethod
    def chain(cls, chain):
        return cls('chain', str(chain), option='chain')

    @classmethod
    def expert(cls):
        return cls('expert', option='expert')

    @classmethod
    def version(cls):
        return cls('version', option='version')

    @classmethod
    def debug(cls):
        return cls('debug')

    @classmethod
    def emulators(cls):
        return cls('emulators')


class HWICommand:

    def __init__(self):
        self.subcommand = None
        self.options = {}
        self._tokens = []
        self._secret = set()  # indexes of tokens masked in repr()

    # Sequence of tokens, ready for either backend.

    def tokens(self):
        return list(self._tokens)

    def __iter__(self):
        return iter(self._tokens)

    def __len__(self):
        return len(self._tokens)

    def __getitem__(self, index):
        return self._tokens[index]

    def __repr__(self):
        shown = []
        for i, token in enumerate(self._tokens):
            if i in self._secret:
                if token.startswith('--') and '=' in token:
                    token = token.split('=', 1)[0] + '=' + MASK
                else:
                    token = MASK
            shown.append(token)
        return '<HWICommand: %s>' % ' '.join(shown)

    def _append(self, token, secret=False):
        if not isinstance(token, str):
            raise InvalidOptionError('Argument %r is not a string' % (token,))
        if '\x00' in token:
            raise InvalidOptionError('Argument must not contain NUL characters')
        if secret:
            self._secret.add(len(self._tokens))
        self._tokens.append(token)

    def _require_subcommand(self, what):
        if self.subcommand is None:
            raise InvalidOptionError('%s must follow the subcommand' % what)

    # Global part.

    def add_flag(self, flag):
        if self.subcommand is not None:
            raise InvalidOptionError('Global flag --%s must precede the subcommand %s' %
                                     (flag.name, self.subcommand))
        for token in flag.tokens():
            self._append(token, secret=flag.secret)
        if flag.option is not None:
            self.options[flag.option] = True if flag.value is None else flag.value
        return self

    def add_fingerprint(self, fingerprint):
        return self.add_flag(HWIFlag.fingerprint(fingerprint))

    def add_chain(self, chain):
        if not isinstance(chain, Chain):
            raise InvalidOptionError('Unknown chain %r' % (chain,))
        self.add_flag(HWIFlag.chain(chain))
        self.options['chain'] = chain
        return self

    def add_expert(self, expert):
        if expert:
            self.add_flag(HWIFlag.expert())
        self.options['expert'] = bool(expert)
        return self

    def add_password(self, password):
        if password:
            self.add_flag(HWIFlag.password(password))
        return self

    def add_subcommand(self, subcommand):
        if self.subcommand is not None:
            raise InvalidOptionError('Subcommand already set to %s' % self.subcommand)
        if not isinstance(subcommand, Subcommand):
            raise InvalidOptionError('Unknown subcommand %r' % (subcommand,))
        self._append(subcommand.value)
        self.subcommand = subcommand
        return self

    # Operation arguments.

    def add_path(self, path, with_flag=False, with_star=False):
        self._require_subcommand('Derivation path')
        if isinstance(path, (list, tuple)):
            path = tools.format_path(path)
        try:
            tools.parse_path(path)
        except (TypeError, ValueError) as e:
            raise InvalidOptionError('Invalid derivation path %r: %s' % (path, e))
        if with_star:
            path = path.rstrip('/') + '/*'
        if with_flag:
            self._append('--path')
        self._append(path)
        self.options['path'] = path
        return self

    def add_end_of_options(self):
        # Tokens after "--" are positional even when they start with "-"
        self._require_subcommand('End of options')
        self._append('--')
        return self

    def add_message(self, message):
        self._require_subcommand('Message')
        if not isinstance(message, str):
            raise InvalidOptionError('Message must be text')
        self._append(message)
        self.options['message'] = message
        return self

    def add_descriptor(self, descriptor):
        self._require_subcommand('Descriptor')
        try:
            descriptor = tools.strip_checksum(descriptor_to_string(descriptor))
        except TypeError as e:
            raise InvalidOptionError(str(e))
        self._append('--desc')
        self._append(descriptor)
        self.options['desc'] = descriptor
        return self

    def add_account(self, account):
        self._require_subcommand('Account')
        if isinstance(account, bool) or not isinstance(account, int) \
                or not 0 <= account < tools.HARDENED_FLAG:
            raise InvalidOptionError('Invalid account %r' % (account,))
        self._append('--account')
        self._append(str(account))
        self.options['account'] = account
        return self

    def add_psbt(self, psbt):
        self._require_subcommand('PSBT')
        if not isinstance(psbt, PSBT):
            try:
                psbt = psbt_from_base64(psbt)
            except ValueError as e:
                raise InvalidOptionError(str(e))
        self._append(psbt.serialize())
        self.options['psbt'] = psbt
        return self

    def add_address_type(self, address_type):
        self._require_subcommand('Address type')
        if not isinstance(address_type, AddressType):
            raise InvalidOptionError('Unknown address type %r' % (address_type,))
        self._append('--addr-type')
        self._append(str(address_type))
        self.options['addr_type'] = address_type
        return self

    def add_keypool(self, keypool):
        # Enabled by default in HWI, so the off state is spelled out
        self._require_subcommand('Keypool flag')
        self._append('--keypool' if keypool else '--nokeypool')
        self.options['keypool'] = bool(keypool)
        return self

    def add_internal(self, internal):
        self._require_subcommand('Internal flag')
        if internal:
            self._append('--internal')
        self.options['internal'] = bool(internal)
        return self

    def add_addr_all(self, addr_all):
        self._require_subcommand('Addr-all flag')
        if addr_all:
            self._append('--addr-all')
        self.options['addr_all'] = bool(addr_all)
        return self

    def add_start_end(self, start, end):
        self._require_subcommand('Range')
        for value in (start, end):
            if isinstance(value, bool) or not isinstance(value, int) \
                    or not 0 <= value <= 0xFFFFFFFF:
                raise InvalidOptionError('Invalid range bound %r' % (value,))
        if start > end:
            raise InvalidOptionError('Range start %d is after end %d' % (start, end))
        self._append(str(start))
        self._append(str(end))
        self.options['start'] = start
        self.options['end'] = end
        return self

    def add_label(self, label):
        self._require_subcommand('Label')
        self._append('--label=%s' % label)
        self.options['label'] = label
        return self

    def add_backup_passphrase(self, passphrase):
        self._require_subcommand('Backup passphrase')
        self._append('--backup_passphrase=%s' % passphrase, secret=True)
        self.options['backup_passphrase'] = passphrase
        return self

    def add_word_count(self, word_count):
        self._require_subcommand('Word count')
        if word_count not in (12, 18, 24) or isinstance(word_count, bool):
            raise InvalidOptionError('Invalid word count. Use 12/18/24')
        self._append('--word_count')
        self._append(str(word_count))
        self.options['word_count'] = word_count
        return self

    def add_pin(self, pin):
        self._require_subcommand('PIN')
        if not isinstance(pin, str) or not pin.isdigit():
            raise InvalidOptionError('PIN must be a string of digits')
        self._append(pin, secret=True)
        self.options['pin'] = pin
        return self

    def add_location(self, location):
        self._require_subcommand('Location')
        self._append('--location=%s' % location)
        self.options['location'] = location
        return self

    def add_source(self, source):
        # The executable ships its own rules, only the embedded call takes a source
        self._require_subcommand('Source')
        self.options['source'] = source
        return self
