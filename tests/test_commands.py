import unittest
import common

from hwiclient.commands import HWICommand, HWIFlag
from hwiclient.exceptions import InvalidOptionError
from hwiclient.messages import AddressType, Chain, Subcommand


class TestCommands(unittest.TestCase):

    def build(self):
        command = HWICommand()
        command.add_fingerprint(common.FINGERPRINT)
        command.add_chain(Chain.SigNet)
        command.add_expert(True)
        command.add_subcommand(Subcommand.GetKeypool)
        command.add_keypool(True)
        command.add_address_type(AddressType.Wit)
        command.add_account(0)
        command.add_path("m/84'/1'/0'/0", with_flag=True, with_star=True)
        command.add_start_end(0, 100)
        return command

    def test_ordering(self):
        self.assertEqual(self.build().tokens(), [
            '--fingerprint', common.FINGERPRINT, '--chain', 'signet', '--expert',
            'getkeypool', '--keypool', '--addr-type', 'wit', '--account', '0',
            '--path', "m/84'/1'/0'/0/*", '0', '100'])

    def test_deterministic(self):
        self.assertEqual(list(self.build()), list(self.build()))
        self.assertEqual(repr(self.build()), repr(self.build()))

    def test_options(self):
        options = self.build().options
        self.assertEqual(options['chain'], Chain.SigNet)
        self.assertEqual(options['addr_type'], AddressType.Wit)
        self.assertEqual(options['start'], 0)
        self.assertEqual(options['end'], 100)
        self.assertTrue(options['expert'])

    def test_sequence(self):
        command = HWICommand().add_subcommand(Subcommand.Wipe)
        self.assertEqual(len(command), 1)
        self.assertEqual(command[0], 'wipe')
        self.assertEqual(command.subcommand, Subcommand.Wipe)

    def test_global_after_subcommand(self):
        command = HWICommand().add_subcommand(Subcommand.Enumerate)
        with self.assertRaises(InvalidOptionError):
            command.add_chain(Chain.Main)
        with self.assertRaises(InvalidOptionError):
            command.add_flag(HWIFlag.debug())

    def test_argument_before_subcommand(self):
        with self.assertRaises(InvalidOptionError):
            HWICommand().add_account(0)
        with self.assertRaises(InvalidOptionError):
            HWICommand().add_path('m/0')

    def test_single_subcommand(self):
        command = HWICommand().add_subcommand(Subcommand.Enumerate)
        with self.assertRaises(InvalidOptionError):
            command.add_subcommand(Subcommand.Wipe)
        with self.assertRaises(InvalidOptionError):
            HWICommand().add_subcommand('enumerate')

    def test_end_of_options(self):
        with self.assertRaises(InvalidOptionError):
            HWICommand().add_end_of_options()
        command = HWICommand().add_subcommand(Subcommand.SignMessage)
        command.add_end_of_options().add_message('--chain main').add_path('m/0h')
        self.assertEqual(command.tokens(), ['signmessage', '--', '--chain main', 'm/0h'])
        self.assertEqual(command.options['message'], '--chain main')
        self.assertNotIn('chain', command.options)

    def test_nul_rejected(self):
        command = HWICommand().add_subcommand(Subcommand.Setup)
        with self.assertRaises(InvalidOptionError):
            command.add_label('bad\x00label')

    def test_flags(self):
        self.assertEqual(HWIFlag.device_type('trezor').tokens(), ['--device-type', 'trezor'])
        self.assertEqual(HWIFlag.device_path('-x').tokens(), ['--device-path=-x'])
        self.assertEqual(HWIFlag.version().tokens(), ['--version'])
        self.assertEqual(HWIFlag.emulators().tokens(), ['--emulators'])

        command = HWICommand().add_flag(HWIFlag.version())
        self.assertIsNone(command.subcommand)
        self.assertTrue(command.options['version'])

    def test_repr_masks_secrets(self):
        command = HWICommand().add_password('p4ss').add_subcommand(Subcommand.Backup)
        command.add_backup_passphrase('b4ckup')
        text = repr(command)
        self.assertNotIn('p4ss', text)
        self.assertNotIn('b4ckup', text)
        self.assertIn('--password=***', text)
        self.assertEqual(command.tokens(), ['--password=p4ss', 'backup', '--backup_passphrase=b4ckup'])

    def test_no_password(self):
        self.assertEqual(HWICommand().add_password(None).add_password('').tokens(), [])

    def test_descriptor_checksum(self):
        command = HWICommand().add_subcommand(Subcommand.DisplayAddress)
        command.add_descriptor('wpkh(...)/0/*#abcdef12')
        self.assertEqual(command.tokens(), ['displayaddress', '--desc', 'wpkh(...)/0/*'])

    def test_start_end_bounds(self):
        command = HWICommand().add_subcommand(Subcommand.GetKeypool)
        with self.assertRaises(InvalidOptionError):
            command.add_start_end(-1, 5)
        with self.assertRaises(InvalidOptionError):
            command.add_start_end(0, 0x100000000)
        with self.assertRaises(InvalidOptionError):
            command.add_start_end(True, 5)
        command.add_start_end(5, 5)
        self.assertEqual(command.tokens(), ['getkeypool', '5', '5'])


if __name__ == '__main__':
    unittest.main()
