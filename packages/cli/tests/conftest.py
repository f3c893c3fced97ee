import pytest

_CI_VARS = (
    "GITHUB_TOKEN",
    "GH_TOKEN",
    "GITHUB_REPOSITORY",
    "PR_NUMBER",
    "GITHUB_EVENT_PATH",
    "GITHUB_OUTPUT",
    "PRGATE_CONFIG",
)


@pytest.fixture(autouse=True)
def clean_ci_env(monkeypatch):
    """Keep the runner's own CI variables from leaking into CLI tests."""
    for name in _CI_VARS:
        monkeypatch.delenv(name, raising=False)
