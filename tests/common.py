import base64
import json
import unittest

import config

from hwiclient import mapping
from hwiclient import tools
from hwiclient import wire
from hwiclient.backend import Backend
from hwiclient.messages import Chain

Device = mapping.get_class('Device')

FINGERPRINT = '8038ecd9'

# BIP32 version bytes of xpub and tpub
MAINNET_PUBLIC = b'\x04\x88\xb2\x1e'
TESTNET_PUBLIC = b'\x04\x35\x87\xcf'


def device_json(**kwargs):
    device = {
        'type': 'trezor',
        'model': 'trezor_t',
        'path': 'webusb:001:4',
        'label': 'test wallet',
        'needs_pin_sent': False,
        'needs_passphrase_sent': False,
        'fingerprint': FINGERPRINT,
    }
    device.update(kwargs)
    return device


def make_xpub(version=TESTNET_PUBLIC, depth=5, child_num=0):
    payload = (version + bytes((depth, )) + b'\x1e\xd1\x7a\x2c' +
               child_num.to_bytes(4, 'big') + bytes(range(32)) +
               b'\x02' + bytes(range(32, 64)))
    return tools.b58encode_check(payload)


def _compact_size(n):
    return bytes((n, ))


def _kv(key, value):
    return _compact_size(len(key)) + key + _compact_size(len(value)) + value


def make_psbt():
    # PSBTv0 spending one P2WPKH output into another
    script = b'\x00\x14' + bytes(range(20))
    tx = (b'\x02\x00\x00\x00' +                        # version
          b'\x01' + bytes(range(32)) + b'\x00\x00\x00\x00' + b'\x00' + b'\xff\xff\xff\xff' +
          b'\x01' + (90000).to_bytes(8, 'little') + _compact_size(len(script)) + script +
          b'\x00\x00\x00\x00')                         # locktime
    witness_utxo = (100000).to_bytes(8, 'little') + _compact_size(len(script)) + script
    data = (b'psbt\xff' +
            _kv(b'\x00', tx) + b'\x00' +
            _kv(b'\x01', witness_utxo) + b'\x00' +
            b'\x00')
    return base64.b64encode(data).decode('ascii')


class FakeBackend(Backend):
    # Records executed commands and replays queued responses

    def __init__(self, *responses):
        self.responses = list(responses)
        self.commands = []
        self.opened = []
        self.closed = False

    def queue(self, *responses):
        self.responses.extend(responses)

    def execute(self, command):
        self.commands.append(command)
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return response
        return json.dumps(response)

    def open(self, device, password=None, expert=False, chain=None):
        self.opened.append((device, password, expert, chain))
        return self

    def version(self):
        return '2.3.1'

    def close(self):
        self.closed = True

    @property
    def last(self):
        return self.commands[-1]


class HWITest(unittest.TestCase):

    def setUp(self):
        self.backend = FakeBackend()
        self.device = wire.load_value(Device, device_json())
        self.client = config.CLIENT(self.backend, self.device, chain=Chain.Test)
        # Tokens every per-device command starts with
        self.globals = ['--fingerprint', FINGERPRINT, '--chain', 'test']

    def tearDown(self):
        self.client.close()

    def assertTokens(self, *tokens):
        self.assertEqual(self.backend.last.tokens(), self.globals + list(tokens))
