import copy
import json
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch
from click.testing import CliRunner
from droidplan import config, emitter
from droidplan.main import cli
from tests.test_layers import SAMPLE_CONFIG

SERVICES = {
    "client": [
        {"client_info": {"android_client_info": {"package_name": "com.example.projectspendlytic"}}},
    ],
}

class TestMain(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, config.CONFIG_FILE)
        self.plan_path = os.path.join(self.test_dir, "plan.json")
        self.conf = copy.deepcopy(SAMPLE_CONFIG)
        with open(os.path.join(self.test_dir, "google-services.json"), "w") as f:
            json.dump(SERVICES, f)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def _invoke(self, *args):
        config.save_config(self.conf, path=self.test_dir)
        return self.runner.invoke(cli, ["--path", self.test_dir, *args])

    def test_resolve_emits_plan(self):
        result = self._invoke("resolve", "--variant", "release", "--output", self.plan_path)
        self.assertEqual(result.exit_code, 0, result.output)
        with open(self.plan_path, "rb") as f:
            plan = emitter.parse_plan(f.read())
        self.assertEqual(plan.identity.effective_id, "com.example.projectspendlytic")
        self.assertEqual(plan.variant.signing_ref, "debug")
        self.assertEqual(plan.variant.inherited_from, "debug")
        self.assertEqual(plan.toolchain.min_supported_version, 23)
        self.assertEqual(plan.toolchain.target_version, 34)
        self.assertTrue(any("debuggable identity" in w for w in plan.warnings))

    def test_resolve_to_stdout_with_digest(self):
        result = self._invoke("resolve", "-V", "debug", "--digest")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('"effective_id": "com.example.projectspendlytic"', result.output)

    def test_resolve_carries_app_version(self):
        result = self._invoke("resolve", "--variant", "release", "--output", self.plan_path)
        self.assertEqual(result.exit_code, 0, result.output)
        with open(self.plan_path, "rb") as f:
            plan = emitter.parse_plan(f.read())
        self.assertEqual(plan.version.code, 4)
        self.assertEqual(plan.version.name, "1.3.0-release")
        self.assertEqual(plan.source_of("version_code"), "app")
        self.assertEqual(plan.source_of("version_name"), "variant:release")

    def test_resolve_wrongly_shaped_service_config(self):
        for services in ({"client": None}, {"client": [{"client_info": None}]}):
            with open(os.path.join(self.test_dir, "google-services.json"), "w") as f:
                json.dump(services, f)
            result = self._invoke("resolve")
            self.assertEqual(result.exit_code, 2, result.output)
            self.assertIn("google-services.json", result.output)

    def test_resolve_rejected(self):
        self.conf["plugins"].append({"name": "crypto", "required_min_toolchain": 36})
        self.conf["identity"]["canonical_id"] = ""
        result = self._invoke("resolve", "--output", self.plan_path)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("UnsatisfiedPluginRequirement [plugin:crypto]", result.output)
        self.assertIn("MissingCanonicalIdentity [identity]", result.output)
        self.assertFalse(os.path.exists(self.plan_path))

    def test_resolve_unregistered_identity(self):
        self.conf["identity"]["effective_id"] = "com.example.renamed"
        result = self._invoke("resolve")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("UnregisteredServiceIdentity", result.output)

    def test_resolve_duplicate_plugin(self):
        self.conf["plugins"].append({"name": "kotlin-android"})
        result = self._invoke("resolve")
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Plugin 'kotlin-android' is already registered.", result.output)

    def test_resolve_unknown_variant(self):
        result = self._invoke("resolve", "--variant", "profile")
        self.assertEqual(result.exit_code, 2)
        self.assertIn("Unknown variant 'profile'", result.output)

    def test_resolve_without_config(self):
        result = self.runner.invoke(cli, ["--path", self.test_dir, "resolve"])
        self.assertEqual(result.exit_code, 2)
        self.assertIn("No droidplan.toml found", result.output)

    def test_validate_all_variants(self):
        result = self._invoke("validate")
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Variant 'debug' is valid.", result.output)
        self.assertIn("Variant 'release' is valid.", result.output)

    def test_validate_rejected_variant(self):
        self.conf["variants"]["release"]["target_version"] = 36
        result = self._invoke("validate", "-V", "release")
        self.assertEqual(result.exit_code, 1)
        self.assertIn("VersionRangeViolation [variant:release] target_version", result.output)

    def test_plugins_lists_activation_order(self):
        result = self._invoke("plugins")
        self.assertEqual(result.exit_code, 0)
        output = result.output
        self.assertLess(output.index("com.android.application"), output.index("kotlin-android"))
        self.assertIn("after com.android.application", output)

    def test_show_plan(self):
        self._invoke("resolve", "--output", self.plan_path)
        result = self.runner.invoke(cli, ["show", self.plan_path])
        self.assertEqual(result.exit_code, 0, result.output)
        with open(self.plan_path, "rb") as f:
            digest = emitter.plan_digest(f.read())
        self.assertIn(digest, result.output)
        self.assertIn("Version:     1.3.0-release (code 4)", result.output)

    def test_show_malformed_plan(self):
        with open(self.plan_path, "w") as f:
            f.write("{}")
        result = self.runner.invoke(cli, ["show", self.plan_path])
        self.assertEqual(result.exit_code, 2)

    @patch("click.edit")
    def test_config_edit(self, mock_edit):
        self._invoke("config", "edit")
        mock_edit.assert_called_once_with(filename=self.config_path)

    def test_version(self):
        result = self.runner.invoke(cli, ["version"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("droidplan", result.output)

if __name__ == "__main__":
    unittest.main()
