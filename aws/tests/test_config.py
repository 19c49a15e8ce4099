"""Unit tests for option resolution and YAML config loading."""
import os
import sys
import tempfile
import pytest

_repo_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
if _repo_root not in sys.path:
    sys.path.insert(0, _repo_root)

from aws import config


# option -> (flag value, env var, env value, config value, outputs key, outputs value, default)
CHAINS = {
    "region": ("us-west-2", "AWS_DEFAULT_REGION", "eu-west-1", "ap-south-1", "Region", "ca-central-1", "us-east-1"),
    "bucket_name": ("flag-bucket", "BUCKET_NAME", "env-bucket", "config-bucket", "BucketName", "record-bucket",
                    "s3-mcp-bucket"),
    "trust_account_one": ("111111111111", "TRUST_ACCOUNT_ONE", "222222222222", "333333333333",
                          "TrustAccountOne", "444444444444", ""),
    "trust_account_two": ("555555555555", "TRUST_ACCOUNT_TWO", "666666666666", "777777777777",
                          "TrustAccountTwo", "888888888888", ""),
}


@pytest.mark.parametrize("name", sorted(CHAINS))
class TestDeployOptionPrecedence:
    """flag > env > config file > outputs.json > default, for every option."""

    def _sources(self, name):
        flag, env_var, env_value, cfg, key, record, default = CHAINS[name]
        return {name: flag}, {env_var: env_value}, {name: cfg}, {key: record}

    def test_flag_wins(self, name):
        args, env, cfg, outputs = self._sources(name)
        options = config.resolve_deploy_options(args, env=env, file_config=cfg, outputs=outputs)
        assert options[name] == CHAINS[name][0]

    def test_env_beats_config_and_record(self, name):
        _, env, cfg, outputs = self._sources(name)
        options = config.resolve_deploy_options({}, env=env, file_config=cfg, outputs=outputs)
        assert options[name] == CHAINS[name][2]

    def test_config_beats_record(self, name):
        _, _, cfg, outputs = self._sources(name)
        options = config.resolve_deploy_options({}, env={}, file_config=cfg, outputs=outputs)
        assert options[name] == CHAINS[name][3]

    def test_record_beats_default(self, name):
        _, _, _, outputs = self._sources(name)
        options = config.resolve_deploy_options({}, env={}, outputs=outputs)
        assert options[name] == CHAINS[name][5]

    def test_default(self, name):
        options = config.resolve_deploy_options({}, env={})
        assert options[name] == CHAINS[name][6]

    def test_empty_values_fall_through(self, name):
        _, env_var, _, _, key, record, _ = CHAINS[name]
        options = config.resolve_deploy_options({name: ""}, env={env_var: ""}, outputs={key: record})
        assert options[name] == record


class TestDeployOptionDefaults:

    def test_stack_name_and_template_defaults(self):
        options = config.resolve_deploy_options({}, env={})
        assert options["stack_name"] == "s3-mcp-infrastructure"
        assert options["template"] == os.path.join(os.getcwd(), "stack.yml")
        assert options["profile"] is None

    def test_stack_name_flag(self):
        options = config.resolve_deploy_options({"stack_name": "custom"}, env={})
        assert options["stack_name"] == "custom"


class TestTeardownOptions:

    def test_region_precedence(self):
        env = {"AWS_DEFAULT_REGION": "eu-west-1"}
        outputs = {"Region": "us-west-2"}
        assert config.resolve_teardown_options({"region": "ap-south-1"}, env=env, outputs=outputs)["region"] == "ap-south-1"
        assert config.resolve_teardown_options({}, env=env, outputs=outputs)["region"] == "eu-west-1"
        assert config.resolve_teardown_options({}, env={}, outputs=outputs)["region"] == "us-west-2"
        assert config.resolve_teardown_options({}, env={})["region"] == "us-east-1"

    def test_force(self):
        assert config.resolve_teardown_options({"force": True}, env={})["force"] is True
        assert config.resolve_teardown_options({}, env={})["force"] is False


class TestValidateTrustAccounts:

    def test_both_present(self):
        config.validate_trust_accounts({"trust_account_one": "1", "trust_account_two": "2"})

    def test_missing_exits_with_example_policy(self, capsys):
        with pytest.raises(SystemExit) as exc:
            config.validate_trust_accounts({"trust_account_one": "1", "trust_account_two": ""})
        assert exc.value.code == 1
        err = capsys.readouterr().err
        assert "trust_account_two" in err
        assert "sts:AssumeRole" in err
        assert "--trust-account-one" in err


class TestLoadConfig:

    def test_loads_yaml(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "deploy.yaml")
            with open(path, "w") as f:
                f.write(
                    "aws:\n"
                    "  region: eu-west-1\n"
                    "  profile: work\n"
                    "stack:\n"
                    "  name: my-stack\n"
                    "  template: templates/stack.yml\n"
                    "  bucket_name: cfg-bucket\n"
                    "  trust_accounts: [111111111111, '222222222222']\n"
                )
            cfg = config.load_config(path)
        assert cfg == {
            "region": "eu-west-1",
            "profile": "work",
            "stack_name": "my-stack",
            "template": os.path.join(os.path.abspath(d), "templates/stack.yml"),
            "bucket_name": "cfg-bucket",
            "trust_account_one": "111111111111",
            "trust_account_two": "222222222222",
        }

    def test_empty_file_is_empty_config(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "deploy.yaml")
            open(path, "w").close()
            assert config.load_config(path) == {}

    def test_missing_file_exits(self):
        with pytest.raises(SystemExit):
            config.load_config("/nonexistent/deploy.yaml")

    def test_non_mapping_exits(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "deploy.yaml")
            with open(path, "w") as f:
                f.write("- just\n- a list\n")
            with pytest.raises(SystemExit):
                config.load_config(path)

    def test_too_many_trust_accounts_exits(self):
        with tempfile.TemporaryDirectory() as d:
            path = os.path.join(d, "deploy.yaml")
            with open(path, "w") as f:
                f.write("stack:\n  trust_accounts: ['1', '2', '3']\n")
            with pytest.raises(SystemExit):
                config.load_config(path)
