"""Tests for configuration loading and comment target resolution."""

import dataclasses
import json

import pytest

from prgate_core.config import load_config, parse_patterns, resolve_comment_target
from prgate_core.errors import ValidationError


def test_defaults_applied_when_no_config_file(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config.coverage_file == "coverage/coverage-final.json"
    assert config.base_branch == "main"
    assert config.file_patterns == (".ts", ".tsx", ".js", ".jsx")
    assert config.source_dir == "src/"
    assert config.threshold == 20
    assert config.request_timeout == 30


def test_config_file_overrides_defaults(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("base_branch: develop\nthreshold: 75\n")
    config = load_config(config_path=str(cfg))
    assert config.base_branch == "develop"
    assert config.threshold == 75


def test_file_patterns_loaded_as_yaml_list(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("file_patterns:\n  - py\n  - '*.pyi'\n")
    config = load_config(config_path=str(cfg))
    assert config.file_patterns == (".py", ".pyi")


def test_cli_overrides_config_file(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("threshold: 75\n")
    config = load_config(config_path=str(cfg), cli_overrides={"threshold": 90})
    assert config.threshold == 90


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("source_dir: lib/\n")
    config = load_config(config_path=str(cfg), cli_overrides={"source_dir": None})
    assert config.source_dir == "lib/"


def test_config_is_immutable(tmp_path):
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.threshold = 0


def test_negative_threshold_rejected(tmp_path):
    with pytest.raises(ValidationError):
        load_config(config_path=str(tmp_path / "nonexistent.yml"), cli_overrides={"threshold": -1})


def test_option_like_base_branch_rejected(tmp_path):
    with pytest.raises(ValidationError, match="base_branch"):
        load_config(
            config_path=str(tmp_path / "nonexistent.yml"),
            cli_overrides={"base_branch": "--upload-pack=touch pwned"},
        )


def test_non_numeric_threshold_rejected(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("threshold: lots\n")
    with pytest.raises(ValidationError):
        load_config(config_path=str(cfg))


def test_malformed_yaml_rejected(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("threshold: [unclosed\n")
    with pytest.raises(ValidationError):
        load_config(config_path=str(cfg))


def test_non_mapping_yaml_rejected(tmp_path):
    cfg = tmp_path / ".gate.yml"
    cfg.write_text("- just\n- a list\n")
    with pytest.raises(ValidationError):
        load_config(config_path=str(cfg))


class TestParsePatterns:
    def test_comma_list_with_dots(self):
        assert parse_patterns(".ts,.tsx") == (".ts", ".tsx")

    def test_adds_missing_dot_and_strips_glob(self):
        assert parse_patterns("ts, *.js ,") == (".ts", ".js")

    def test_drops_duplicates(self):
        assert parse_patterns(".ts,ts") == (".ts",)

    def test_none_is_empty(self):
        assert parse_patterns(None) == ()


class TestResolveCommentTarget:
    ENV = {"GITHUB_REPOSITORY": "owner/repo", "PR_NUMBER": "42"}

    def test_reads_environment(self):
        target = resolve_comment_target("tok", env=self.ENV)
        assert target.token == "tok"
        assert target.repo == "owner/repo"
        assert target.pr_number == 42

    def test_explicit_arguments_win(self):
        target = resolve_comment_target("tok", repo="other/repo", pr_number=7, env=self.ENV)
        assert target.repo == "other/repo"
        assert target.pr_number == 7

    def test_missing_token(self):
        with pytest.raises(ValidationError, match="GITHUB_TOKEN"):
            resolve_comment_target(None, env=self.ENV)

    def test_missing_repository(self):
        with pytest.raises(ValidationError, match="GITHUB_REPOSITORY"):
            resolve_comment_target("tok", env={"PR_NUMBER": "1"})

    def test_malformed_repository(self):
        with pytest.raises(ValidationError, match="owner/repo"):
            resolve_comment_target("tok", env={"GITHUB_REPOSITORY": "just-a-name", "PR_NUMBER": "1"})

    def test_missing_pr_number(self):
        with pytest.raises(ValidationError, match="PR_NUMBER"):
            resolve_comment_target("tok", env={"GITHUB_REPOSITORY": "owner/repo"})

    def test_non_integer_pr_number(self):
        with pytest.raises(ValidationError, match="integer"):
            resolve_comment_target("tok", env={"GITHUB_REPOSITORY": "owner/repo", "PR_NUMBER": "abc"})

    def test_pr_number_from_event_payload(self, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"pull_request": {"number": 99}}))
        env = {"GITHUB_REPOSITORY": "owner/repo", "GITHUB_EVENT_PATH": str(event)}
        assert resolve_comment_target("tok", env=env).pr_number == 99

    def test_event_payload_without_pull_request(self, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"ref": "refs/heads/main"}))
        env = {"GITHUB_REPOSITORY": "owner/repo", "GITHUB_EVENT_PATH": str(event)}
        with pytest.raises(ValidationError, match="PR_NUMBER"):
            resolve_comment_target("tok", env=env)

    def test_event_payload_that_is_not_an_object(self, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps([{"number": 5}]))
        env = {"GITHUB_REPOSITORY": "owner/repo", "GITHUB_EVENT_PATH": str(event)}
        with pytest.raises(ValidationError, match="PR_NUMBER"):
            resolve_comment_target("tok", env=env)
