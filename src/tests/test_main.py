"""
Tests for the CLI entry point.
"""

import pytest
from unittest.mock import MagicMock, patch

import main
from gitlab_ci_provider.utils import parse_assignments


def _run(argv):
    return main.run(main.build_parser().parse_args(argv))


def test_parse_assignments():
    assert parse_assignments(["A=1", "B=x=y", "C"]) == {"A": "1", "B": "x=y", "C": ""}
    assert parse_assignments(None) == {}


def test_badge_action(clean_env, capsys):
    assert _run(["badge", "--project-id", "org/repo"]) == 0

    out = capsys.readouterr().out
    assert "https://gitlab.com/org/repo/pipelines/badges/master/pipeline.svg" in out


def test_url_action_self_hosted(clean_env, capsys):
    assert _run(["url", "--project-id", "org/repo", "--gitlab-url", "git.example.org"]) == 0

    assert capsys.readouterr().out.strip() == "https://git.example.org/org/repo/pipelines"


def test_infer_action(clean_env):
    assert _run(["infer", "--remote-url", "git@gitlab.com:org/repo.git"]) == 0
    assert _run(["infer", "--remote-url", "https://github.com/org/repo"]) == 1


def test_configure_without_token_fails(clean_env):
    """Test a missing GITLAB_TOKEN is reported as a failure."""
    assert _run(["configure", "--project-id", "org/repo", "--var", "A=1"]) == 1


def test_configure_action(clean_env, monkeypatch, fake_api):
    """Test configure writes the --var values through the provider."""
    monkeypatch.setenv("GITLAB_TOKEN", "secret")

    with patch("gitlab_ci_provider.provider.GitLabAPI", return_value=fake_api):
        assert _run(["configure", "--project-id", "org/repo", "--var", "A=1", "--var", "B="]) == 0

    assert fake_api.variables == {
        "A": "1",
        "TERMINUS_BUILD_TOOLS_PROVIDER_GIT_GITLAB_URL": "gitlab.com",
    }


def test_configure_api_failure(clean_env, monkeypatch, fake_api):
    monkeypatch.setenv("GITLAB_TOKEN", "secret")
    fake_api.fail_on.add(("POST", "A"))

    with patch("gitlab_ci_provider.provider.GitLabAPI", return_value=fake_api):
        assert _run(["configure", "--project-id", "org/repo", "--var", "A=1"]) == 1


def test_add_key_action(clean_env, monkeypatch, fake_api, tmp_path):
    monkeypatch.setenv("GITLAB_TOKEN", "secret")
    key_file = tmp_path / "id_rsa"
    key_file.write_text("PRIVATE KEY\n")

    with patch("gitlab_ci_provider.provider.GitLabAPI", return_value=fake_api):
        assert _run(["add-key", "--project-id", "org/repo", "--key-file", str(key_file)]) == 0

    assert fake_api.variables == {"SSH_PRIVATE_KEY": "PRIVATE KEY\n"}


def test_project_id_required(clean_env):
    assert _run(["configure"]) == 1


def test_unknown_action_exits():
    with pytest.raises(SystemExit):
        main.build_parser().parse_args(["trigger"])


def test_add_key_missing_file(clean_env, monkeypatch, fake_api, tmp_path):
    """Test an unreadable key file exits 1 without sending requests."""
    monkeypatch.setenv("GITLAB_TOKEN", "secret")

    with patch("gitlab_ci_provider.provider.GitLabAPI", return_value=fake_api):
        assert _run(["add-key", "--project-id", "org/repo", "--key-file", str(tmp_path / "missing")]) == 1

    assert fake_api.calls == []


def test_configure_non_json_response(clean_env, monkeypatch):
    """Test a broken API response ends the CLI with exit code 1."""
    monkeypatch.setenv("GITLAB_TOKEN", "secret")
    response = MagicMock()
    response.__enter__.return_value.read.return_value = b"<html>maintenance</html>"

    with patch("urllib.request.urlopen", return_value=response):
        assert _run(["configure", "--project-id", "org/repo", "--var", "A=1"]) == 1
