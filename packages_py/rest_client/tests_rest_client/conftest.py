import pytest

ENV_VARS = ("REST_CLIENT_QUERY_FORMAT", "SSL_CERT_VERIFY", "NODE_TLS_REJECT_UNAUTHORIZED")

@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep environment overrides from leaking into tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
