"""Shared fixtures: resolved provider configs, a Linux bootstrap request and
a patched CloudStack client."""

from unittest.mock import MagicMock, patch
import pytest

from stackrunner.base.config import ProviderConfig, ResolvedIdentifiers
from stackrunner.base.params import BootstrapInstance, RunnerApplicationDownload

ZONE_ID = "1f0e7c7a-0c1b-4b8e-9f3a-2d4c5b6a7e8f"
OFFERING_ID = "2a1b3c4d-5e6f-4a7b-8c9d-0e1f2a3b4c5d"
TEMPLATE_ID = "3b2c4d5e-6f7a-4b8c-9d0e-1f2a3b4c5d6e"
PROJECT_ID = "4c3d5e6f-7a8b-4c9d-8e0f-2a3b4c5d6e7f"

LINUX_TOOLS = RunnerApplicationDownload(
    os="linux",
    architecture="x64",
    download_url="https://example.com/actions-runner-linux-x64-2.316.0.tar.gz",
    filename="actions-runner-linux-x64-2.316.0.tar.gz",
    sha256_checksum="abc123",
)
WINDOWS_TOOLS = RunnerApplicationDownload(
    os="win",
    architecture="x64",
    download_url="https://example.com/actions-runner-win-x64-2.316.0.zip",
    filename="actions-runner-win-x64-2.316.0.zip",
)


def make_config(**overrides) -> ProviderConfig:
    values = {
        "api_url": "https://cloudstack.example.com/client/api",
        "api_key": "api-key",
        "secret": "secret",
        "zone": "zone-a",
        "service_offering": "2-4096",
        "template": "ubuntu-2404",
    }
    values.update(overrides)
    return ProviderConfig(**values)


def make_bootstrap(**overrides) -> BootstrapInstance:
    values = {
        "name": "runner-1",
        "pool_id": "pool-1",
        "os_type": "linux",
        "arch": "amd64",
        "tools": [LINUX_TOOLS.model_dump(), WINDOWS_TOOLS.model_dump()],
        "repo_url": "https://github.com/example/repo",
        "callback-url": "https://garm.example.com/api/v1/callbacks",
        "metadata-url": "https://garm.example.com/api/v1/metadata",
        "instance-token": "token",
        "labels": ["self-hosted", "linux"],
    }
    values.update(overrides)
    return BootstrapInstance.model_validate(values)


@pytest.fixture
def config():
    cfg = make_config()
    cfg.set_resolved(
        ResolvedIdentifiers(
            zone_id=ZONE_ID,
            service_offering_id=OFFERING_ID,
            template_id=TEMPLATE_ID,
        )
    )
    return cfg


@pytest.fixture
def project_config():
    cfg = make_config(project="infra")
    cfg.set_resolved(
        ResolvedIdentifiers(
            zone_id=ZONE_ID,
            service_offering_id=OFFERING_ID,
            template_id=TEMPLATE_ID,
            project_id=PROJECT_ID,
        )
    )
    return cfg


@pytest.fixture
def bootstrap():
    return make_bootstrap()


@pytest.fixture
def mock_cs():
    with patch("stackrunner.cloudstack.client.CloudStack") as MockCloudStack:
        client = MagicMock()
        MockCloudStack.return_value = client
        yield MockCloudStack, client
