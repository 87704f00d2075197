import json
import sys
import unittest
from unittest import mock

import common
import config

from hwilib import commands as hwi_commands
from hwilib.common import AddressType as HWIAddressType
from hwilib.common import Chain as HWIChain
from hwilib.errors import ActionCanceledError, BadArgumentError
from hwilib.psbt import PSBT

from hwiclient import decoder
from hwiclient.backend_embedded import EmbeddedBackend, HWILib
from hwiclient.commands import HWICommand, HWIFlag
from hwiclient.exceptions import (ActionCancelledException, CallException,
                                  DeviceNotFoundException, EmbeddedError,
                                  InvalidOptionError, MissingDeviceError)
from hwiclient.messages import AddressType, Chain, ErrorCode, LogLevel, Subcommand
from hwiclient.types import psbt_from_base64


class FakeCommands(object):
    # Stands in for hwilib.commands, recording every call

    def __init__(self):
        self.calls = []
        self.results = {}

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)

        def call(*args):
            self.calls.append((name, ) + args)
            result = self.results.get(name, {'success': True})
            if isinstance(result, Exception):
                raise result
            return result
        return call


class RecordingLock(object):

    def __init__(self):
        self.depth = 0
        self.entered = 0

    def __enter__(self):
        self.depth += 1
        self.entered += 1

    def __exit__(self, _type, value, traceback):
        self.depth -= 1
        return False


class TestBackendEmbedded(unittest.TestCase):

    def setUp(self):
        self.commands = FakeCommands()
        self.hw_client = mock.Mock()
        self.lib = HWILib(self.commands, json_dumps=json.dumps, chain_type=HWIChain,
                          address_type=HWIAddressType,
                          version='2.3.1', udev_source='/usr/lib/hwilib/udev')
        self.lock = RecordingLock()
        self.device = common.wire.load_value(common.Device, common.device_json())
        self.commands.results['get_client'] = self.hw_client
        self.backend = EmbeddedBackend(self.lib, lock=self.lock)
        self.client = config.CLIENT.get_client(self.device, chain=Chain.Test, backend=self.backend)

    def test_open(self):
        self.assertEqual(self.commands.calls[0],
                         ('get_client', 'trezor', 'webusb:001:4', '', False, HWIChain.TEST))
        self.assertIs(self.client.backend.hw_client, self.hw_client)
        self.assertIs(self.client.backend.lock, self.lock)

    def test_open_failure(self):
        self.commands.results['get_client'] = None
        with self.assertRaises(DeviceNotFoundException) as cm:
            self.backend.open(self.device, password='pw')
        self.assertEqual(cm.exception.code, ErrorCode.DeviceConnError)
        self.assertEqual(self.commands.calls[-1][3], 'pw')

    def test_getxpub(self):
        xpub = common.make_xpub()
        self.commands.results['getxpub'] = {'xpub': xpub}

        res = self.client.get_xpub("m/44'/1'/0'/0/0")
        self.assertEqual(res.xpub.to_string(), xpub)
        self.assertEqual(self.commands.calls[-1],
                         ('getxpub', self.hw_client, "m/44'/1'/0'/0/0", False))
        self.assertEqual(self.lock.depth, 0)
        self.assertGreater(self.lock.entered, 1)

    def test_getkeypool(self):
        self.commands.results['getkeypool'] = [{
            'desc': 'wpkh(a)', 'range': [5, 5], 'timestamp': 'now',
            'internal': True, 'keypool': False, 'watchonly': True,
        }]

        res = self.client.get_keypool(keypool=False, internal=True, address_type=AddressType.ShWit,
                                      path='m/49h/1h/0h/1', start=5, end=5)
        self.assertEqual(res[0].range, (5, 5))
        self.assertEqual(self.commands.calls[-1],
                         ('getkeypool', self.hw_client, 'm/49h/1h/0h/1/*', 5, 5, True, False,
                          0, HWIAddressType.SH_WIT, False))

    def test_displayaddress(self):
        self.commands.results['displayaddress'] = {'address': 'tb1qaddress'}

        self.client.display_address_with_desc('wpkh(a)#checksum')
        self.assertEqual(self.commands.calls[-1],
                         ('displayaddress', self.hw_client, None, 'wpkh(a)', HWIAddressType.WIT))

        self.client.display_address_with_path('m/84h/1h/0h/0/0', AddressType.Tap)
        self.assertEqual(self.commands.calls[-1],
                         ('displayaddress', self.hw_client, 'm/84h/1h/0h/0/0', None, HWIAddressType.TAP))

    def test_signtx(self):
        # The real hwilib command, with the device side mocked
        self.commands.signtx = hwi_commands.signtx
        self.hw_client.sign_tx.side_effect = lambda tx: tx
        psbt = common.make_psbt()

        res = self.client.sign_tx(psbt)
        (hwi_psbt, ), _ = self.hw_client.sign_tx.call_args
        self.assertIsInstance(hwi_psbt, PSBT)
        self.assertEqual(len(hwi_psbt.inputs), 1)
        self.assertEqual(res.psbt.serialize(), hwi_psbt.serialize())

    def test_signtx_args(self):
        psbt = common.make_psbt()
        self.commands.results['signtx'] = {'psbt': psbt, 'signed': True}

        self.client.sign_tx(psbt)
        name, hw_client, text = self.commands.calls[-1]
        self.assertEqual(name, 'signtx')
        self.assertIs(hw_client, self.hw_client)
        self.assertIsInstance(text, str)
        self.assertEqual(len(psbt_from_base64(text).inputs), 1)

    def test_signmessage(self):
        self.commands.results['signmessage'] = {'signature': 'IAAA'}

        res = self.client.sign_message('-1 BTC refund', 'm/44h/1h/0h/0/0')
        self.assertEqual(res.signature, b'\x20\x00\x00')
        self.assertEqual(self.commands.calls[-1],
                         ('signmessage', self.hw_client, '-1 BTC refund', 'm/44h/1h/0h/0/0'))

    def test_pin(self):
        self.client.prompt_pin()
        self.assertEqual(self.commands.calls[-1], ('prompt_pin', self.hw_client))
        self.client.send_pin('12345')
        self.assertEqual(self.commands.calls[-1], ('send_pin', self.hw_client, '12345'))

    def test_missing_required_option(self):
        for subcommand in (Subcommand.SignTx, Subcommand.SignMessage, Subcommand.SendPin):
            with self.assertRaises(InvalidOptionError):
                self.client.backend.execute(HWICommand().add_subcommand(subcommand))

        command = HWICommand().add_subcommand(Subcommand.GetKeypool).add_path('m/84h/1h/0h/0')
        with self.assertRaises(InvalidOptionError) as cm:
            self.client.backend.execute(command)
        self.assertIn('start', str(cm.exception))
        self.assertEqual(self.commands.calls[-1][0], 'get_client')
        self.assertEqual(self.lock.depth, 0)

    def test_lifecycle(self):
        self.client.setup_device(label='wallet', passphrase='secret')
        self.assertEqual(self.commands.calls[-1], ('setup_device', self.hw_client, 'wallet', 'secret'))
        self.client.restore_device(word_count=12)
        self.assertEqual(self.commands.calls[-1], ('restore_device', self.hw_client, '', 12))
        self.client.send_pin('1234')
        self.assertEqual(self.commands.calls[-1], ('send_pin', self.hw_client, '1234'))
        self.client.wipe_device()
        self.assertEqual(self.commands.calls[-1], ('wipe_device', self.hw_client))

    def test_same_result_as_process(self):
        value = {'receive': ['wpkh(a)'], 'internal': ['wpkh(b)']}
        self.commands.results['getdescriptors'] = value

        embedded = self.client.get_descriptors()
        process = decoder.deserialize(json.dumps(value), 'Descriptor')
        self.assertEqual(embedded, process)
        self.assertEqual(self.commands.calls[-1], ('getdescriptors', self.hw_client, 0))

    def test_enumerate(self):
        self.commands.results['enumerate'] = [common.device_json()]

        devices = config.CLIENT.enumerate(backend=self.backend)
        self.assertEqual(devices, [self.device])
        self.assertEqual(self.commands.calls[-1], ('enumerate', ))

        config.CLIENT.enumerate(backend=self.backend, password='pw')
        self.assertEqual(self.commands.calls[-1], ('enumerate', 'pw'))

    def test_install_udev_rules(self):
        config.CLIENT.install_udev_rules(backend=self.backend)
        self.assertEqual(self.commands.calls[-1],
                         ('install_udev_rules', '/usr/lib/hwilib/udev', '/etc/udev/rules.d/'))

    def test_missing_device(self):
        with self.assertRaises(MissingDeviceError):
            self.backend.execute(HWICommand().add_subcommand(Subcommand.Wipe))
        self.assertEqual(self.commands.calls[-1][0], 'get_client')

    def test_errors(self):
        self.commands.results['wipe_device'] = BadArgumentError('Bad argument')
        with self.assertRaises(CallException) as cm:
            self.client.wipe_device()
        self.assertEqual(cm.exception.code, ErrorCode.BadArgument)
        self.assertIsInstance(cm.exception.__cause__, BadArgumentError)

        self.commands.results['wipe_device'] = ActionCanceledError('Wipe cancelled')
        with self.assertRaises(ActionCancelledException):
            self.client.wipe_device()

        self.commands.results['wipe_device'] = RuntimeError('boom')
        with self.assertRaises(EmbeddedError) as cm:
            self.client.wipe_device()
        self.assertIn('boom', str(cm.exception))
        self.assertEqual(self.lock.depth, 0)

    def test_version(self):
        self.assertEqual(self.backend.version(), '2.3.1')
        self.assertEqual(self.backend.execute(HWICommand().add_flag(HWIFlag.version())), '2.3.1')
        self.assertEqual(config.CLIENT.get_version(backend=self.backend), '2.3.1')

    def test_set_log_level(self):
        self.assertTrue(self.backend.supports('set_log_level'))
        with mock.patch('hwiclient.backend_embedded.logging.basicConfig') as basic_config:
            config.CLIENT.set_log_level(LogLevel.Debug, backend=self.backend)
        basic_config.assert_called_once_with(level=10)

    def test_install_hwilib(self):
        self.assertTrue(self.backend.supports('install_hwilib'))
        with mock.patch('hwiclient.backend_embedded.subprocess.run') as run:
            run.return_value = mock.Mock(returncode=0, stderr=b'')
            config.CLIENT.install_hwilib('2.3.1', backend=self.backend)
        run.assert_called_once_with([sys.executable, '-m', 'pip', 'install', '--user', 'hwi==2.3.1'],
                                    stdout=mock.ANY, stderr=mock.ANY)

        with mock.patch('hwiclient.backend_embedded.subprocess.run') as run:
            run.return_value = mock.Mock(returncode=1, stderr=b'No matching distribution')
            with self.assertRaises(CallException) as cm:
                self.backend.install_hwilib()
        self.assertIn('No matching distribution', cm.exception.message)
        self.assertEqual(run.call_args[0][0][-1], 'hwi')

    def test_close(self):
        self.client.close()
        self.hw_client.close.assert_called_once_with()
        self.assertIsNone(self.client.backend.hw_client)


if __name__ == '__main__':
    unittest.main()
