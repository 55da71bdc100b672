import unittest
from droidplan.signing import SigningTable, DEBUG_IDENTITY
from droidplan.models import SigningIdentity
from droidplan.errors import SigningIdentityNotFound

class TestSigningTable(unittest.TestCase):

    def test_debug_identity_is_implicit(self):
        table = SigningTable()
        self.assertEqual(table.lookup("debug"), DEBUG_IDENTITY)
        self.assertEqual(table.names(), ["debug"])

    def test_debug_identity_can_be_excluded(self):
        table = SigningTable(include_debug=False)
        with self.assertRaises(SigningIdentityNotFound):
            table("debug")

    def test_config_redefines_debug(self):
        table = SigningTable.from_config({"debug": {"store_file": "/keys/debug.jks", "key_alias": "dbg"}})
        identity = table("debug")
        self.assertEqual(identity.store_file, "/keys/debug.jks")
        self.assertFalse(identity.debuggable)

    def test_lookup_by_name(self):
        release = SigningIdentity("release-key", "/keys/release.jks", "upload")
        table = SigningTable([release])
        self.assertIs(table("release-key"), release)
        self.assertEqual(table.names(), ["debug", "release-key"])
        with self.assertRaises(SigningIdentityNotFound) as cm:
            table("upload")
        self.assertEqual(cm.exception.name, "upload")

if __name__ == "__main__":
    unittest.main()
