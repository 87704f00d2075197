from enum import Enum


class DeviceType(str, Enum):
    Ledger = 'ledger'
    Trezor = 'trezor'
    BitBox01 = 'digitalbitbox'
    BitBox02 = 'bitbox02'
    KeepKey = 'keepkey'
    Coldcard = 'coldcard'
    Jade = 'jade'

    def __str__(self):
        return self.value

    @classmethod
    def from_string(cls, name):
        # Types HWI learns after this list was written are kept as plain strings
        try:
            return cls(name.lower())
        except ValueError:
            return name
