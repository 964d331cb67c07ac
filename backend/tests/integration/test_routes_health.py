"""
Integration tests for the health check endpoint.

Verifies GET /health returns 200 with status "healthy" plus bridge state.
No authentication required for this endpoint.
Version: 1.0.0
"""
import pytest
from unittest.mock import MagicMock

from app.container import get_notifier, get_upstream_bridge
from app.services.upstream_bridge import BridgeState


@pytest.mark.integration
class TestHealth:

    def test_health_with_bridge(self, make_client, mock_notifier):
        bridge = MagicMock()
        bridge.state = BridgeState.CONNECTED
        mock_notifier.subscriber_count = 3
        client = make_client(overrides={get_upstream_bridge: bridge, get_notifier: mock_notifier})

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "bridge": "connected", "subscribers": 3}

    def test_health_bridge_disabled(self, make_client, mock_notifier):
        client = make_client(overrides={get_upstream_bridge: None, get_notifier: mock_notifier})

        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["bridge"] == "disabled"
