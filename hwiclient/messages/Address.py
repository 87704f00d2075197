from .. import wire as p


class AddressStringType(p.UnicodeType):
    # Network is not checked; the device derived it for the client's chain

    @staticmethod
    def load(value):
        value = p.UnicodeType.load(value)
        if not value:
            raise ValueError('Empty address')
        return value


Address = p.MessageType('Address')
Address.add_field('address', 'address', AddressStringType, flags=p.FLAG_REQUIRED)
