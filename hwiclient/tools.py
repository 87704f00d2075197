import hashlib

HARDENED_FLAG = 0x80000000

__b58chars = '123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz'
__b58base = len(__b58chars)


def Hash(data):
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def b58encode(v):
    """ encode v, which is a string of bytes, to base58."""
    long_value = int.from_bytes(v, 'big')

    result = ''
    while long_value:
        long_value, mod = divmod(long_value, __b58base)
        result = __b58chars[mod] + result

    # Bitcoin does a little leading-zero-compression:
    # leading 0-bytes in the input become leading-1s
    n_pad = len(v) - len(v.lstrip(b'\0'))
    return (__b58chars[0] * n_pad) + result


def b58decode(v, length=None):
    """ decode v into a string of len bytes."""
    long_value = 0
    for c in v:
        index = __b58chars.find(c)
        if index < 0:
            raise ValueError('Invalid base58 character %r' % c)
        long_value = long_value * __b58base + index

    result = long_value.to_bytes((long_value.bit_length() + 7) // 8, 'big')

    n_pad = len(v) - len(v.lstrip(__b58chars[0]))
    result = b'\0' * n_pad + result

    if length is not None and len(result) != length:
        raise ValueError('Expected %d bytes, got %d' % (length, len(result)))

    return result


def b58encode_check(v):
    return b58encode(v + Hash(v)[:4])


def b58decode_check(v):
    data = b58decode(v)
    if len(data) < 4:
        raise ValueError('Base58 string too short')
    payload, checksum = data[:-4], data[-4:]
    if Hash(payload)[:4] != checksum:
        raise ValueError('Invalid base58 checksum')
    return payload


def parse_path(n):
    # Convert string of bip32 path to list of uint32 integers with hardened flags
    # m/0'/1h/2 -> [0x80000000, 0x80000001, 2]
    if not n:
        return []

    parts = n.split('/')
    if parts[0] in ('m', 'M'):
        parts = parts[1:]

    path = []
    for x in parts:
        hardened = False
        if x[-1:] in ("'", 'h', 'H'):
            x = x[:-1]
            hardened = True

        if not x.isdigit():
            raise ValueError('Invalid path component %r' % x)
        x = int(x)
        if x >= HARDENED_FLAG:
            raise ValueError('Path component %d out of range' % x)

        if hardened:
            x |= HARDENED_FLAG

        path.append(x)

    return path


def format_path(n):
    # [0x8000002c, 0, 1] -> m/44h/0/1
    items = ['m']
    for x in n:
        if x & HARDENED_FLAG:
            items.append('%dh' % (x & ~HARDENED_FLAG))
        else:
            items.append('%d' % x)
    return '/'.join(items)


def strip_checksum(desc):
    # HWI does not accept descriptors with the checksum suffix
    return desc.split('#', 1)[0]

