from enum import Enum


class AddressType(Enum):
    Legacy = 'legacy'
    ShWit = 'sh_wit'
    Wit = 'wit'
    Tap = 'tap'

    def __str__(self):
        return self.value
